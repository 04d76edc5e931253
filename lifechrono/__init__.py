"""LifeChrono application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask

from lifechrono.config import config_by_name
from lifechrono.core.errors import LifeChronoError
from lifechrono.extensions import init_extensions, jwt


def create_app(config_name: Optional[str] = None, overrides: Optional[dict] = None) -> Flask:
    """Create and configure the LifeChrono Flask application.

    ``overrides`` is applied on top of the config class before extensions
    bind, e.g. to point a test app at a file-backed database.
    """
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///"):
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    # Register CLI commands
    from lifechrono.scripts.commands import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from lifechrono.core.auth.controllers import auth_bp  # local import to avoid circulars
    from lifechrono.core.insights.controllers import insights_api_bp
    from lifechrono.core.users.controllers import user_api_bp
    from lifechrono.domains.dashboard.controllers.dashboard_api import dashboard_api_bp
    from lifechrono.domains.entries.controllers.entry_api import entry_api_bp
    from lifechrono.domains.lifetime.controllers.lifetime_api import lifetime_api_bp
    from lifechrono.domains.mood.controllers.mood_api import mood_api_bp
    from lifechrono.domains.recurring.controllers.recurring_api import recurring_api_bp
    from lifechrono.domains.snapshots.controllers.snapshot_api import snapshot_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(user_api_bp, url_prefix="/api/users")
    app.register_blueprint(entry_api_bp, url_prefix="/api/entries")
    app.register_blueprint(mood_api_bp, url_prefix="/api/mood-logs")
    app.register_blueprint(recurring_api_bp, url_prefix="/api/recurring")
    app.register_blueprint(dashboard_api_bp, url_prefix="/api/dashboard")
    app.register_blueprint(lifetime_api_bp, url_prefix="/api/lifetime")
    app.register_blueprint(insights_api_bp, url_prefix="/api/insights")
    app.register_blueprint(snapshot_api_bp, url_prefix="/api/snapshots")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(LifeChronoError)
    def _domain_error(exc: LifeChronoError):
        return exc.to_dict(), exc.status

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """JWT revocation lookups against the persistent blocklist."""

    @jwt.token_in_blocklist_loader
    def _token_revoked(_jwt_header, jwt_payload: dict) -> bool:
        from lifechrono.core.auth.services import is_token_revoked

        return is_token_revoked(jwt_payload.get("jti") or "")

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return {"ok": False, "error": "unauthorized", "message": reason}, 401

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return {"ok": False, "error": "unauthorized", "message": reason}, 401

    @jwt.revoked_token_loader
    def _revoked(_jwt_header, _jwt_payload):
        return {"ok": False, "error": "token_revoked"}, 401
