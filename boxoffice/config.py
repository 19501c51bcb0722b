# boxoffice/config.py
import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(BASE_DIR, ".env"))

INSTANCE_DIR = os.path.join(BASE_DIR, "instance")


def _env(key: str, default=None):
    v = os.getenv(key)
    return v if v not in (None, "", "None") else default


def _env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v in (None, "", "None"):
        return default
    return str(v).strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_int(key: str, default: int) -> int:
    try:
        return int(_env(key, default))
    except (TypeError, ValueError):
        return default


def _env_list(key: str, default: str = "") -> list[str]:
    raw = _env(key, default) or ""
    return [p.strip() for p in raw.split(",") if p.strip()]


def _resolve_sqlite_uri(db_url: str | None) -> str:
    if not db_url:
        db_path = os.path.join(INSTANCE_DIR, "database.db")
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return "sqlite:///" + db_path.replace("\\", "/")

    if db_url.startswith("sqlite:///"):
        raw_path = db_url.replace("sqlite:///", "", 1)
        if not os.path.isabs(raw_path):
            raw_path = os.path.join(BASE_DIR, raw_path)
        db_path = os.path.normpath(raw_path)
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return "sqlite:///" + db_path.replace("\\", "/")

    # Heroku-style URLs still say postgres://
    if db_url.startswith("postgres://"):
        return "postgresql://" + db_url[len("postgres://"):]

    return db_url


class Config:
    SECRET_KEY = _env("SECRET_KEY", "dev-please-change-me")

    SQLALCHEMY_DATABASE_URI = _resolve_sqlite_uri(_env("DATABASE_URL"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_AS_ASCII = False

    # Receipt uploads (comprovantes)
    UPLOAD_FOLDER = _env("UPLOAD_FOLDER", os.path.join(INSTANCE_DIR, "receipts"))
    RECEIPTS_BASE_URL = _env("RECEIPTS_BASE_URL")
    RECEIPT_EXTENSIONS = _env_list("RECEIPT_EXTENSIONS", "jpg,jpeg,png,webp,heic,heif,gif")
    MAX_CONTENT_LENGTH = _env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024)

    # Catalog / event
    EVENT_NAME = _env("EVENT_NAME", "Cine Juventude")
    # CATALOG_FILE replaces the built-in table; CATALOG_PRODUCTS picks the
    # enabled ids from whichever table is active (all of a file when unset)
    CATALOG_FILE = _env("CATALOG_FILE")
    CATALOG_PRODUCTS = _env_list("CATALOG_PRODUCTS", "" if CATALOG_FILE else "combo_individual")
    TICKETS_TOTAL = _env_int("TICKETS_TOTAL", 100)
    REQUIRE_SELLER = _env_bool("REQUIRE_SELLER", False)

    # PIX (manual payment)
    PIX_KEY = _env("PIX_KEY", "")
    PIX_PAYLOAD = _env("PIX_PAYLOAD", "")

    # Codes
    ORDER_CODE_PREFIX = _env("ORDER_CODE_PREFIX", "CJ")
    TICKET_QR_PREFIX = _env("TICKET_QR_PREFIX", "CINE-JUVENTUDE")
    COUNTER_CAS_ATTEMPTS = _env_int("COUNTER_CAS_ATTEMPTS", 10)

    CORS_ORIGINS = _env_list("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

    AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", True)

    MAIL_SERVER = _env("MAIL_SERVER", "localhost")
    MAIL_PORT = _env_int("MAIL_PORT", 465)
    MAIL_USE_SSL = _env_bool("MAIL_USE_SSL", True)
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS", False)
    MAIL_USERNAME = _env("MAIL_USERNAME")
    MAIL_PASSWORD = _env("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = _env("MAIL_DEFAULT_SENDER", _env("MAIL_USERNAME"))
    MAIL_SUPPRESS_SEND = _env_bool("MAIL_SUPPRESS_SEND", False)
    ORDER_NOTIFY_EMAIL = _env("ORDER_NOTIFY_EMAIL")
