# boxoffice/api/routes/order_routes.py
from flask import Blueprint, request, jsonify, current_app, url_for

from boxoffice.errors import BoxOfficeError, StoreError
from boxoffice.extensions import db
from boxoffice.services import orders

order_bp = Blueprint("order_bp", __name__, url_prefix="/api/orders")


def _error(e: BoxOfficeError):
    return jsonify({"ok": False, "error": e.message}), e.status_code


@order_bp.post("")
def create_order():
    """
    Checkout (multipart/form-data):
      name, whatsapp, product_id, seller_id (optional), receipt (file)
    """
    try:
        order = orders.create_order(
            name=request.form.get("name"),
            whatsapp=request.form.get("whatsapp"),
            product_id=request.form.get("product_id"),
            seller_id=request.form.get("seller_id"),
            receipt=request.files.get("receipt"),
        )
    except BoxOfficeError as e:
        return _error(e)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("create_order failed")
        return _error(StoreError())

    return jsonify({
        "ok": True,
        "orderId": order.id,
        "orderCode": order.order_code,
        "status": order.status,
        "ticketUrl": url_for("storefront.ticket", order_id=order.id, _external=True),
    }), 201


@order_bp.get("/<order_id>")
def get_order(order_id: str):
    try:
        o = orders.get_order(order_id)
    except BoxOfficeError as e:
        return _error(e)
    data = o.to_dict()
    # cancelled orders still exist but are not a valid ticket
    data["valid"] = o.is_valid_ticket
    return jsonify({"ok": True, "order": data}), 200
