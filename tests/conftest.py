import io

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

from boxoffice.app import create_app
from boxoffice.config import Config
from boxoffice.extensions import db
from boxoffice.models import Seller, User


def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def make_receipt(filename="comprovante.png", data=None) -> FileStorage:
    return FileStorage(
        stream=io.BytesIO(png_bytes() if data is None else data),
        filename=filename,
        content_type="image/png",
    )


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret"
        SERVER_NAME = "localhost"
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "test.db")
        UPLOAD_FOLDER = str(tmp_path / "receipts")
        RECEIPTS_BASE_URL = None
        MAIL_SUPPRESS_SEND = True
        ORDER_NOTIFY_EMAIL = None
        CATALOG_PRODUCTS = ["single", "combo_individual", "combo_couple"]
        CATALOG_FILE = None
        TICKETS_TOTAL = 100
        REQUIRE_SELLER = False
        PIX_KEY = "cinejuventude@email.com"
        PIX_PAYLOAD = "00020126PIXPAYLOAD"
        ORDER_CODE_PREFIX = "CJ"
        TICKET_QR_PREFIX = "CINE-JUVENTUDE"
        COUNTER_CAS_ATTEMPTS = 5

    return create_app(TestConfig)


@pytest.fixture
def ctx(app):
    """Application context for calling services directly."""
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seller_factory(app):
    def _make(name="Ana", active=True) -> int:
        with app.app_context():
            s = Seller(name=name, active=active)
            db.session.add(s)
            db.session.commit()
            return s.id
    return _make


@pytest.fixture
def order_factory(app):
    """Create an order through the checkout service; returns its id."""
    from boxoffice.services import orders

    def _make(name="Maria Silva", whatsapp="63999998888", product_id="combo_individual", seller_id=None) -> str:
        with app.app_context():
            order = orders.create_order(
                name=name,
                whatsapp=whatsapp,
                product_id=product_id,
                seller_id=seller_id,
                receipt=make_receipt(),
            )
            return order.id
    return _make


@pytest.fixture
def admin_client(app, client):
    with app.app_context():
        u = User(username="admin")
        u.set_password("s3nha-forte")
        db.session.add(u)
        db.session.commit()
    resp = client.post("/admin/login", data={"username": "admin", "password": "s3nha-forte"})
    assert resp.status_code == 302
    return client
