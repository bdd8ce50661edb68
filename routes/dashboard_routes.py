from flask import Blueprint, jsonify, g

from utils import admin_required
from utils.records import dashboard_stats

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


@dashboard_bp.route('/stats')
@admin_required
def stats():
    """Totals shown on the dashboard cards. ``average_grade`` is null when no grades exist."""
    return jsonify(dashboard_stats(g.access))
