import io

from boxoffice.extensions import db
from boxoffice.models import Order
from boxoffice.services import inventory, orders
from conftest import png_bytes


def _form(**kw):
    data = {
        "name": "Maria Silva",
        "whatsapp": "(63) 99999-8888",
        "product_id": "combo_individual",
        "receipt": (io.BytesIO(png_bytes()), "comprovante.png"),
    }
    data.update(kw)
    return {k: v for k, v in data.items() if v is not None}


def test_index_lists_products_and_scarcity(client):
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Combo Individual" in html
    assert "Ingresso + Pipoca + Refri" in html
    assert "Restam" in html
    assert "cinejuventude@email.com" in html


def test_checkout_redirects_to_ticket(app, client):
    resp = client.post("/checkout", data=_form(), content_type="multipart/form-data")
    assert resp.status_code == 302
    assert "/ticket/" in resp.headers["Location"]

    page = client.get(resp.headers["Location"])
    assert page.status_code == 200
    html = page.get_data(as_text=True)
    assert "Maria Silva" in html
    assert "VÁLIDO" in html

    with app.app_context():
        order = Order.query.one()
        assert order.order_code in html
        assert order.customer_whatsapp == "63999998888"
        assert inventory.sold() == 1


def test_checkout_without_receipt_rerenders_form(app, client):
    resp = client.post("/checkout", data=_form(receipt=None), content_type="multipart/form-data")
    assert resp.status_code == 400
    html = resp.get_data(as_text=True)
    assert "anexe o comprovante" in html
    # typed values survive the round trip
    assert "Maria Silva" in html
    with app.app_context():
        assert Order.query.count() == 0


def test_ticket_unknown_or_cancelled_is_invalid(app, client, order_factory):
    assert client.get("/ticket/nope").status_code == 404

    order_id = order_factory()
    with app.app_context():
        orders.cancel_order(order_id)
    resp = client.get(f"/ticket/{order_id}")
    assert resp.status_code == 404
    assert "cancelado" in resp.get_data(as_text=True)
    assert client.get(f"/ticket/{order_id}/qr.png").status_code == 404


def test_used_ticket_still_renders(app, client, order_factory):
    from boxoffice.services import checkin

    order_id = order_factory()
    with app.app_context():
        checkin.validate(db.session.get(Order, order_id).order_code)
    resp = client.get(f"/ticket/{order_id}")
    assert resp.status_code == 200
    assert "UTILIZADO" in resp.get_data(as_text=True)


def test_ticket_qr_png(client, order_factory):
    order_id = order_factory()
    resp = client.get(f"/ticket/{order_id}/qr.png")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_receipt_is_served(app, client, order_factory):
    order_id = order_factory()
    with app.app_context():
        url = db.session.get(Order, order_id).receipt_url
    path = url.split("localhost", 1)[1]
    resp = client.get(path)
    assert resp.status_code == 200
    assert resp.data == png_bytes()


# --- JSON API ---------------------------------------------------------------

def test_api_products(client):
    data = client.get("/api/products").get_json()
    assert data["ok"] is True
    ids = [p["id"] for p in data["products"]]
    assert ids == ["single", "combo_individual", "combo_couple"]
    couple = data["products"][2]
    assert couple["ticket_count"] == 2
    assert data["payment"]["pix_key"] == "cinejuventude@email.com"


def test_api_inventory(client, order_factory):
    order_factory(product_id="combo_couple")
    data = client.get("/api/inventory").get_json()
    assert data == {"ok": True, "sold": 2, "total": 100, "remaining": 98, "percentage": 2.0}


def test_api_sellers_only_active(client, seller_factory):
    seller_factory("Ana")
    seller_factory("Bruno", active=False)
    data = client.get("/api/sellers").get_json()
    assert [s["name"] for s in data["sellers"]] == ["Ana"]
    assert data["required"] is False


def test_api_create_order(client):
    resp = client.post("/api/orders", data=_form(), content_type="multipart/form-data")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["ok"] is True
    assert body["status"] == "paid"
    assert body["orderCode"].startswith("CJ-")

    got = client.get(f"/api/orders/{body['orderId']}").get_json()
    assert got["order"]["product_name"] == "Combo Individual"
    assert got["order"]["price"] == 10.0
    assert got["order"]["valid"] is True


def test_api_create_order_validation_error(client):
    resp = client.post("/api/orders", data=_form(name=""), content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_api_get_unknown_order(client):
    resp = client.get("/api/orders/missing")
    assert resp.status_code == 404
    assert resp.get_json() == {"ok": False, "error": "Pedido não encontrado"}


def test_api_oversized_receipt_is_400(client, monkeypatch):
    from PIL import Image

    buf = io.BytesIO()
    Image.new("1", (100, 100)).save(buf, format="PNG")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    resp = client.post(
        "/api/orders",
        data=_form(receipt=(io.BytesIO(buf.getvalue()), "comprovante.png")),
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "O comprovante precisa ser uma imagem válida."
