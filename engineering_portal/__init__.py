from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, render_template, url_for

from engineering_portal import config
from engineering_portal.auth import current_user, is_admin
from engineering_portal.extensions import db
from engineering_portal.i18n import current_culture, is_rtl, select_culture, tr
from engineering_portal.oauth import enabled_providers

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def media_url(path: str | None) -> str:
    if not path:
        return ""
    if path.startswith(("http://", "https://")):
        return path
    return url_for("home.media", filename=path.lstrip("~/"))


def init_db(app: Flask) -> None:
    with app.app_context():
        db.create_all()
        if app.config.get("SEED_ON_STARTUP"):
            from engineering_portal.seed import seed_database

            seed_database()


def register_blueprints(app: Flask) -> None:
    from engineering_portal.routes import account, alerts, departments, exams, faculty, home, news, support
    from engineering_portal.routes.admin import bp as admin_bp

    for module in (home, account, departments, faculty, exams, alerts, news, support):
        app.register_blueprint(module.bp)
    app.register_blueprint(admin_bp)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(400)
    def bad_request(_error):
        return render_template("error.html", code=400, message="The request could not be understood."), 400

    @app.errorhandler(403)
    def forbidden(_error):
        return render_template("error.html", code=403, message="You do not have permission for this page."), 403

    @app.errorhandler(404)
    def not_found(_error):
        return render_template("error.html", code=404, message="The page you requested was not found."), 404

    @app.errorhandler(413)
    def too_large(_error):
        return render_template(
            "error.html",
            code=413,
            message=f"Request too large. Max upload size is {config.MAX_UPLOAD_BYTES // (1024 * 1024)} MB.",
        ), 413

    @app.errorhandler(500)
    def server_error(_error):
        db.session.rollback()
        return render_template("error.html", code=500, message="Something went wrong. Please try again later."), 500


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(config.load_settings())
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])
    db.init_app(app)

    app.before_request(select_culture)

    @app.context_processor
    def inject_globals() -> dict[str, Any]:
        return {
            "current_user": current_user(),
            "is_admin": is_admin(),
            "culture": current_culture(),
            "is_rtl": is_rtl(),
            "tr": tr,
            "media_url": media_url,
            "external_providers": enabled_providers(),
        }

    register_blueprints(app)
    register_error_handlers(app)
    init_db(app)

    logger.info("Engineering portal ready (database=%s)", app.config["SQLALCHEMY_DATABASE_URI"])
    return app
