# boxoffice/app.py
import logging
import os

# Show INFO logs even outside the werkzeug access log
logging.basicConfig(level=logging.INFO)

from flask import Flask, jsonify, request, flash, redirect, url_for
from werkzeug.exceptions import RequestEntityTooLarge

from boxoffice.config import Config
from boxoffice.extensions import db, login_manager, bcrypt, migrate, cors, init_mail

from boxoffice.admin import admin_bp
from boxoffice.auth import auth_bp
from boxoffice.api.routes.catalog_routes import api_catalog
from boxoffice.api.routes.order_routes import order_bp
from boxoffice.storefront import storefront_bp
from boxoffice.cli import register_commands
from boxoffice import models as _models  # noqa: F401


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    init_mail(app)

    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or []}},
    )

    login_manager.login_view = "auth.login"
    login_manager.login_message = "Faça login para acessar o painel."
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    app.register_blueprint(storefront_bp)
    app.register_blueprint(api_catalog)
    app.register_blueprint(order_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)

    register_commands(app)

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(e):
        msg = "Comprovante muito grande."
        if request.path.startswith("/api/"):
            return jsonify({"ok": False, "error": msg}), 413
        flash(msg, "danger")
        return redirect(url_for("storefront.index"))

    if app.config.get("AUTO_CREATE_TABLES", True):
        with app.app_context():
            db.create_all()

    app.logger.info(
        "boxoffice ready: db=%s uploads=%s",
        app.config["SQLALCHEMY_DATABASE_URI"].split("@")[-1],
        app.config["UPLOAD_FOLDER"],
    )
    return app
