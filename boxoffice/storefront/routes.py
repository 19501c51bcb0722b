# boxoffice/storefront/routes.py
import io

import qrcode
from flask import (
    render_template, request, redirect, url_for, flash, current_app, send_file,
    send_from_directory, abort,
)

from boxoffice.errors import BoxOfficeError, NotFound, StoreError
from boxoffice.extensions import db
from boxoffice.models import Seller
from boxoffice.services import catalog, inventory, orders
from . import storefront_bp


def _render_index(form=None, status=200):
    products = catalog.list_products()
    sellers = Seller.query.filter_by(active=True).order_by(Seller.name.asc()).all()
    return render_template(
        "storefront/index.html",
        event_name=current_app.config.get("EVENT_NAME"),
        products=products,
        payment=catalog.payment_info(products[0] if len(products) == 1 else None),
        inventory=inventory.snapshot(),
        sellers=sellers,
        require_seller=bool(current_app.config.get("REQUIRE_SELLER")),
        form=form or {},
    ), status


@storefront_bp.route("/")
def index():
    return _render_index()


@storefront_bp.post("/checkout")
def checkout():
    form = {
        "name": request.form.get("name", ""),
        "whatsapp": request.form.get("whatsapp", ""),
        "product_id": request.form.get("product_id", ""),
        "seller_id": request.form.get("seller_id", ""),
    }
    try:
        order = orders.create_order(receipt=request.files.get("receipt"), **form)
    except BoxOfficeError as e:
        flash(e.message, "danger")
        return _render_index(form, e.status_code)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("checkout failed")
        flash(StoreError.default_message, "danger")
        return _render_index(form, 500)

    flash("Compra realizada com sucesso!", "success")
    return redirect(url_for("storefront.ticket", order_id=order.id))


def _valid_order_or_none(order_id):
    try:
        order = orders.get_order(order_id)
    except NotFound:
        return None
    return order if order.is_valid_ticket else None


def qr_payload(order) -> str:
    prefix = current_app.config.get("TICKET_QR_PREFIX") or ""
    return f"{prefix}:{order.order_code}" if prefix else order.order_code


@storefront_bp.route("/ticket/<order_id>")
def ticket(order_id):
    order = _valid_order_or_none(order_id)
    if order is None:
        return render_template("storefront/ticket_invalid.html"), 404
    return render_template(
        "storefront/ticket.html",
        event_name=current_app.config.get("EVENT_NAME"),
        order=order,
        qr_text=qr_payload(order),
    )


@storefront_bp.route("/ticket/<order_id>/qr.png")
def ticket_qr(order_id):
    order = _valid_order_or_none(order_id)
    if order is None:
        abort(404)

    img = qrcode.make(qr_payload(order))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return send_file(
        buf,
        mimetype="image/png",
        as_attachment=False,
        download_name=f"{order.order_code}.png",
        max_age=300,
    )


@storefront_bp.route("/receipts/<path:filename>")
def receipt_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
