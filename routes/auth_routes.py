from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import IntegrityError

from extensions import db, limiter
from routes import request_payload
from utils.access import current_access, login_session, logout_session
from utils.audit import log_event
from utils.records import create_operator, find_operator
from utils.security import verify_password
from utils.validation import signup_form

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@auth_bp.route('/signup', methods=['POST'])
@limiter.limit('5 per minute')
def signup():
    """Create an operator account and sign it in."""
    form = signup_form(request_payload())
    if find_operator(form['email']) is not None:
        return jsonify({'error': 'An account with this email already exists', 'field': 'email'}), 409
    try:
        profile = create_operator(form['email'], form['password'], form['full_name'])
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.session.rollback()
        return jsonify({'error': 'An account with this email already exists', 'field': 'email'}), 409
    ctx = login_session(profile)
    log_event(ctx, 'operator.signup', f'profile:{profile.id}')
    return jsonify({'operator': profile.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
# Throttle brute-force attempts
@limiter.limit('10 per minute')
def login():
    data = request_payload()
    email = str(data.get('email') or '')
    password = str(data.get('password') or '')
    profile = find_operator(email)
    if profile is None or not verify_password(profile.password_hash, password):
        current_app.logger.warning("Failed login for %s from %s", email.strip().lower() or '-', request.remote_addr)
        return jsonify({'error': 'Invalid email or password'}), 401
    ctx = login_session(profile)
    log_event(ctx, 'operator.login', f'profile:{profile.id}')
    return jsonify({'operator': profile.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    logout_session()
    return jsonify({'ok': True})


@auth_bp.route('/me', methods=['GET'])
def me():
    ctx = current_access()
    return jsonify({'operator': {'id': ctx.operator_id, 'email': ctx.email, 'role': ctx.role}})
