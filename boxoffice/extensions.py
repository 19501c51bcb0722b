# boxoffice/extensions.py
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from flask_cors import CORS
from flask_mail import Mail

# Keep extension instances in one place to avoid circular imports
db = SQLAlchemy()
login_manager = LoginManager()
bcrypt = Bcrypt()
migrate = Migrate()
cors = CORS()
mail = Mail()


@login_manager.user_loader
def load_user(user_id):
    # Lazy import to avoid circular dependency when loading the model
    from boxoffice.models.user import User
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


def _coerce_bool(v, default=False) -> bool:
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    return s in ("1", "true", "t", "yes", "y", "on")


def _clean_hostname(server: str | None) -> str:
    """Return hostname without scheme/path/spaces."""
    s = (server or "").strip()
    if "://" in s:
        s = s.split("://", 1)[1]
    if "/" in s:
        s = s.split("/", 1)[0]
    return s


def init_mail(app):
    """
    Initialize Flask-Mail after sanitizing the MAIL_* config
    (scheme in MAIL_SERVER, SSL and TLS both on, unparsable port).
    """
    cfg = app.config

    server = _clean_hostname(cfg.get("MAIL_SERVER")) or "localhost"
    cfg["MAIL_SERVER"] = server

    use_ssl = _coerce_bool(cfg.get("MAIL_USE_SSL"), False)
    use_tls = _coerce_bool(cfg.get("MAIL_USE_TLS"), False)
    if use_ssl and use_tls:
        cfg["MAIL_USE_TLS"] = False
        app.logger.info("MAIL_USE_SSL and MAIL_USE_TLS were True -> disabling TLS (prefer SSL).")

    try:
        int(cfg.get("MAIL_PORT"))
    except (TypeError, ValueError):
        port = 465 if use_ssl else (587 if use_tls else 25)
        cfg["MAIL_PORT"] = port
        app.logger.info("MAIL_PORT was invalid -> setting %s", port)

    if not cfg.get("MAIL_DEFAULT_SENDER"):
        cfg["MAIL_DEFAULT_SENDER"] = cfg.get("MAIL_USERNAME")

    app.logger.debug(
        "MAIL cfg -> server=%s port=%s ssl=%s tls=%s sender=%s",
        cfg.get("MAIL_SERVER"),
        cfg.get("MAIL_PORT"),
        bool(cfg.get("MAIL_USE_SSL")),
        bool(cfg.get("MAIL_USE_TLS")),
        cfg.get("MAIL_DEFAULT_SENDER"),
    )

    mail.init_app(app)
