# -*- coding: utf-8 -*-
from flask import Flask
from flask_login import current_user

from .config import Config, ensure_instance
from .errors import register_error_handlers
from .extensions import db, migrate, login_manager
from .logger import configure_logging, get_logger

# blueprints
from .auth import auth_bp
from .modules.staff import bp as staff_bp
from .modules.attendance import bp as attendance_bp
from .modules.advances import bp as advances_bp
from .modules.payroll import bp as payroll_bp
from .modules.credit import bp as credit_bp
from .modules.petroleum import bp as petroleum_bp
from .modules.tyres import bp as tyres_bp
from .modules.crusher import bp as crusher_bp

__version__ = "0.1.0"


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    app.json.ensure_ascii = False
    ensure_instance(app)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FILE") or None)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    register_error_handlers(app)

    # --- blueprints ---
    app.register_blueprint(auth_bp)
    app.register_blueprint(staff_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(advances_bp)
    app.register_blueprint(payroll_bp)
    app.register_blueprint(credit_bp)
    app.register_blueprint(petroleum_bp)
    app.register_blueprint(tyres_bp)
    app.register_blueprint(crusher_bp)

    # --- index ---
    @app.get("/")
    def home():
        return {
            "ok": True,
            "app": app.config.get("REPORT_TITLE"),
            "version": __version__,
            "user": current_user.to_dict() if current_user.is_authenticated else None,
        }

    get_logger("app").info(f"app created ({app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]})")
    return app
