from flask import Blueprint, request, jsonify, g

from routes import request_payload
from utils import admin_required
from utils import records
from utils.payment_status import PaymentStatus
from utils.validation import ValidationError, payment_form

payment_bp = Blueprint('payments', __name__, url_prefix='/payments')


def _status_filter(raw):
    value = (raw or '').strip()
    if not value or value.lower() == 'all':
        return None
    try:
        return PaymentStatus.parse(value)
    except ValueError:
        raise ValidationError(f"Unknown payment status '{value}'", 'status')


@payment_bp.route('', methods=['GET'])
@admin_required
def view_payments():
    payments = records.list_payments(g.access)
    return jsonify({'payments': [p.to_dict(with_student=True) for p in payments]})


@payment_bp.route('/status', methods=['GET'])
@admin_required
def payment_status():
    """Tuition, total paid, balance and status for every student."""
    rows = records.payment_statuses(g.access, _status_filter(request.args.get('status')))
    return jsonify({
        'students': [
            {
                'id': student.id,
                'first_name': student.first_name,
                'last_name': student.last_name,
                **summary.to_dict(),
            }
            for student, summary in rows
        ]
    })


@payment_bp.route('', methods=['POST'])
@admin_required
def add_payment():
    payment = records.record_payment(g.access, payment_form(request_payload()))
    return jsonify({'payment': payment.to_dict()}), 201


@payment_bp.route('/<int(max=2147483647):payment_id>', methods=['DELETE'])
@admin_required
def delete_payment(payment_id):
    records.delete_payment(g.access, payment_id)
    return '', 204
