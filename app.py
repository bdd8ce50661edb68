import logging
import uuid
from datetime import datetime

import click
from flask import Flask, request, redirect, jsonify, g
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from extensions import db, migrate, limiter
from routes.auth_routes import auth_bp
from routes.student_routes import student_bp
from routes.payment_routes import payment_bp
from routes.grade_routes import grade_bp, subject_bp
from routes.dashboard_routes import dashboard_bp
from utils.access import NotAuthenticated, NotAuthorized
from utils.records import RecordNotFound, create_operator, find_operator, seed_default_subjects
from utils.validation import ValidationError, signup_form

_APP_START_TS = datetime.now()


def create_app(config_object=Config, **overrides) -> Flask:
    app = Flask(__name__)

    # Load configuration from Config (falls back to sensible defaults inside Config)
    app.config.from_object(config_object)
    app.config.update(overrides)
    _configure_logging(app)

    # Trust reverse proxy headers for scheme/host when enabled
    if app.config.get("TRUST_PROXY", True):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)  # type: ignore[method-assign]

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(payment_bp)
    app.register_blueprint(grade_bp)
    app.register_blueprint(subject_bp)
    app.register_blueprint(dashboard_bp)

    _register_hooks(app)
    _register_probes(app)
    _register_error_handlers(app)
    _register_commands(app)
    return app


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)


def _register_hooks(app: Flask) -> None:
    # Enforce HTTPS for all requests (except localhost) when enabled
    @app.before_request
    def _enforce_https_redirect():
        if not app.config.get("ENFORCE_HTTPS", False):
            return None
        # Skip for local development hosts
        host = (request.host or "").split(":")[0]
        if host in ("127.0.0.1", "localhost"):
            return None
        if request.is_secure:
            return None
        url = request.url.replace("http://", "https://", 1)
        return redirect(url, code=301)

    # Assign a per-request correlation id for tracing
    @app.before_request
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex[:16]

    # Set security headers on every response
    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        # HSTS only when cookies marked secure (implies HTTPS)
        if app.config.get("SESSION_COOKIE_SECURE", False):
            resp.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        if g.get("request_id"):
            resp.headers.setdefault("X-Request-ID", g.request_id)
        return resp


def _register_probes(app: Flask) -> None:
    @app.route("/healthz")
    def healthz():
        """Basic liveness probe. Public and unauthenticated.

        Returns JSON with minimal info; does not require DB.
        """
        up_secs = max(0, int((datetime.now() - _APP_START_TS).total_seconds()))
        return jsonify({
            "ok": True,
            "status": "alive",
            "uptime_seconds": up_secs,
            "version": app.config.get("APP_NAME", "Academy Management System"),
        })

    @app.route("/readyz")
    def readyz():
        """Readiness probe. Checks DB connectivity."""
        try:
            db.session.execute(text("SELECT 1"))
            db_ok = True
        except SQLAlchemyError:
            app.logger.exception("Readiness check failed")
            db.session.rollback()
            db_ok = False
        return jsonify({"ok": db_ok, "db": db_ok}), (200 if db_ok else 503)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(err):
        return jsonify({"error": err.message, "field": err.field}), 400

    @app.errorhandler(NotAuthenticated)
    def _not_authenticated(err):
        return jsonify({"error": str(err)}), 401

    @app.errorhandler(NotAuthorized)
    def _not_authorized(err):
        return jsonify({"error": str(err)}), 403

    @app.errorhandler(RecordNotFound)
    def _not_found(err):
        return jsonify({"error": str(err)}), 404

    @app.errorhandler(IntegrityError)
    def _integrity_error(err):
        db.session.rollback()
        app.logger.warning("Integrity error on %s %s: %s", request.method, request.path, err.orig)
        return jsonify({"error": "Record conflicts with existing data"}), 409

    @app.errorhandler(SQLAlchemyError)
    def _database_error(err):
        db.session.rollback()
        app.logger.exception("Database error on %s %s", request.method, request.path)
        return jsonify({"error": "Database error, please try again"}), 500

    @app.errorhandler(HTTPException)
    def _http_error(err):
        return jsonify({"error": err.description}), err.code


def _register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create tables and seed the default subjects."""
        db.create_all()
        added = seed_default_subjects()
        click.echo(f"Database ready ({added} subjects added)")

    @app.cli.command("create-operator")
    @click.argument("email")
    @click.argument("password")
    @click.option("--full-name", default="Admin User", show_default=True)
    @click.option("--role", type=click.Choice(["admin", "staff"]), default="admin", show_default=True)
    def create_operator_command(email, password, full_name, role):
        """Create an operator account."""
        try:
            form = signup_form({"email": email, "password": password, "full_name": full_name})
        except ValidationError as err:
            raise click.BadParameter(err.message, param_hint=err.field)
        if find_operator(form["email"]) is not None:
            raise click.ClickException(f"Operator {form['email']} already exists")
        profile = create_operator(form["email"], form["password"], form["full_name"], role=role)
        click.echo(f"Created operator {profile.email} ({profile.role})")


if __name__ == "__main__":
    create_app().run(debug=False)
