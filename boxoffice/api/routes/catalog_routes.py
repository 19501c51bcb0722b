# boxoffice/api/routes/catalog_routes.py
from flask import Blueprint, jsonify, current_app

from boxoffice.models import Seller
from boxoffice.services import catalog, inventory

api_catalog = Blueprint("api_catalog", __name__, url_prefix="/api")


@api_catalog.get("/products")
def list_products():
    products = catalog.list_products()
    return jsonify({
        "ok": True,
        "event": current_app.config.get("EVENT_NAME"),
        "products": [p.to_dict() for p in products],
        "payment": catalog.payment_info(products[0] if len(products) == 1 else None),
    }), 200


@api_catalog.get("/inventory")
def get_inventory():
    """Polled by the storefront to refresh the scarcity bar."""
    return jsonify({"ok": True, **inventory.snapshot().to_dict()}), 200


@api_catalog.get("/sellers")
def list_active_sellers():
    sellers = Seller.query.filter_by(active=True).order_by(Seller.name.asc()).all()
    return jsonify({
        "ok": True,
        "required": bool(current_app.config.get("REQUIRE_SELLER")),
        "sellers": [{"id": s.id, "name": s.name} for s in sellers],
    }), 200
