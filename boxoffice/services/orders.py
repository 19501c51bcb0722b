# boxoffice/services/orders.py
"""
Order lifecycle: checkout (create), cancel, lookup.

A checkout stores the receipt image first, then inserts the order as `paid`
and bumps the sold counter in one transaction. Payment is confirmed by a
human looking at the receipt, so there is no pending step.
"""
from __future__ import annotations

import re
import secrets
import string
import time

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from boxoffice.errors import NotFound, StoreError, TerminalStateConflict, ValidationError
from boxoffice.extensions import db
from boxoffice.models import Order, Seller
from boxoffice.models.order import STATUS_CANCELLED, STATUS_PAID, STATUS_USED, STATUSES
from boxoffice.services import catalog, inventory, receipts
from boxoffice.services.notifications import notify_new_order

_B36 = string.digits + string.ascii_uppercase
_NON_DIGITS = re.compile(r"\D")
_HAS_LETTERS = re.compile(r"[^\W\d_]")


# --- Helpers ----------------------------------------------------------------

def to_base36(n: int) -> str:
    if n < 0:
        raise ValueError("negative")
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_B36[rem])
    return "".join(reversed(out))


def generate_order_code(prefix: str | None = None) -> str:
    """`CJ-<base36 ms timestamp><3 random base36>`, uppercase."""
    prefix = prefix or current_app.config.get("ORDER_CODE_PREFIX", "CJ")
    stamp = to_base36(int(time.time() * 1000))
    rand = "".join(secrets.choice(_B36) for _ in range(3))
    return f"{prefix}-{stamp}{rand}".upper()


def normalize_whatsapp(value: str | None) -> str:
    """'(63) 99999-8888' -> '63999998888'"""
    return _NON_DIGITS.sub("", str(value or ""))


def normalize_order_code(value: str | None) -> str:
    return str(value or "").strip().upper()


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _resolve_seller(seller_id) -> Seller | None:
    raw = str(seller_id or "").strip()
    if not raw:
        if current_app.config.get("REQUIRE_SELLER"):
            raise ValidationError("Selecione o vendedor que te indicou.")
        return None
    try:
        sid = int(raw)
    except ValueError:
        raise ValidationError("Vendedor inválido.")
    seller = db.session.get(Seller, sid)
    if seller is None or not seller.active:
        raise ValidationError("Vendedor inválido.")
    return seller


# --- Lifecycle --------------------------------------------------------------

def create_order(*, name, whatsapp, product_id, receipt, seller_id=None) -> Order:
    name = str(name or "").strip()
    phone = normalize_whatsapp(whatsapp)
    if not name or not phone or receipt is None or not getattr(receipt, "filename", None):
        raise ValidationError()
    if len(name) > 120 or len(phone) > 20:
        raise ValidationError("Nome ou WhatsApp muito longo.")

    product = catalog.get_product(product_id)
    seller = _resolve_seller(seller_id)

    try:
        filename = receipts.save(receipt)
    except OSError:
        current_app.logger.exception("Receipt upload failed")
        raise StoreError()
    receipt_url = receipts.public_url(filename)

    try:
        order = Order(
            order_code=generate_order_code(),
            customer_name=name,
            customer_whatsapp=phone,
            seller_id=seller.id if seller else None,
            product_type=product.id,
            product_name=product.name,
            price=product.price,
            status=STATUS_PAID,
            receipt_url=receipt_url,
        )
        db.session.add(order)
        db.session.flush()

        sold_now = inventory.increment(product.ticket_count)

        if seller is not None:
            db.session.execute(
                db.update(Seller)
                .where(Seller.id == seller.id)
                .values(total_sales=Seller.total_sales + 1)
            )

        db.session.commit()
    except StoreError:
        db.session.rollback()
        raise
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("create_order failed (receipt %s left orphaned)", filename)
        raise StoreError()

    current_app.logger.info(
        "Order %s created: %s x%s, tickets_sold=%s",
        order.order_code, product.id, product.ticket_count, sold_now,
    )
    notify_new_order(order)
    return order


def get_order(order_id: str) -> Order:
    order = db.session.get(Order, str(order_id or ""))
    if order is None:
        raise NotFound("Pedido não encontrado")
    return order


def cancel_order(order_id: str) -> Order:
    """
    paid -> cancelled. Cancelling twice is a no-op; a used ticket can't be
    cancelled. The sold counter is left alone.
    """
    res = db.session.execute(
        db.update(Order)
        .where(Order.id == str(order_id), Order.status == STATUS_PAID)
        .values(status=STATUS_CANCELLED)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 1:
        db.session.commit()
        order = db.session.get(Order, str(order_id), populate_existing=True)
        current_app.logger.info("Order %s cancelled", order.order_code)
        return order

    db.session.rollback()
    order = db.session.get(Order, str(order_id), populate_existing=True)
    if order is None:
        raise NotFound("Pedido não encontrado")
    if order.status == STATUS_CANCELLED:
        return order
    if order.status == STATUS_USED:
        raise TerminalStateConflict("Ingresso já utilizado não pode ser cancelado.", status=order.status)
    raise TerminalStateConflict("Pedido não está pago.", status=order.status)


def search_orders(q: str | None = None, status: str | None = None, limit: int = 500) -> list[Order]:
    query = Order.query
    q = (q or "").strip()
    if q:
        like = f"%{_escape_like(q)}%"
        digits = normalize_whatsapp(q)
        clauses = [
            Order.order_code.ilike(like, escape="\\"),
            Order.customer_name.ilike(like, escape="\\"),
        ]
        if digits and not _HAS_LETTERS.search(q):
            clauses.append(Order.customer_whatsapp.like(f"%{digits}%"))
        query = query.filter(or_(*clauses))
    if status and status != "all":
        if status not in STATUSES:
            raise ValidationError("Status inválido.")
        query = query.filter(Order.status == status)
    limit = max(1, min(int(limit or 500), 5000))
    return query.order_by(Order.created_at.desc()).limit(limit).all()
