# boxoffice/services/checkin.py
"""
Check-in at the door.

    paid ──validate──> used
    paid ──cancel────> cancelled

`used` and `cancelled` are sinks. The paid -> used step is a conditional
UPDATE, so two staff scanning the same ticket at once can't both admit it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from flask import current_app

from boxoffice.errors import ValidationError
from boxoffice.extensions import db
from boxoffice.models import Order
from boxoffice.models.order import STATUS_CANCELLED, STATUS_PAID, STATUS_PENDING, STATUS_USED
from boxoffice.services.orders import normalize_order_code

CHECKED_IN = "checked_in"
NOT_FOUND = "not_found"
ALREADY_USED = "already_used"
CANCELLED = "cancelled"
NOT_PAID = "not_paid"

MESSAGES = {
    CHECKED_IN: "✅ Check-in realizado com sucesso!",
    NOT_FOUND: "Ingresso não encontrado",
    ALREADY_USED: "Ingresso já foi utilizado!",
    CANCELLED: "Ingresso cancelado!",
    NOT_PAID: "Pagamento ainda não confirmado.",
}

_REJECTED_BY_STATUS = {
    STATUS_USED: ALREADY_USED,
    STATUS_CANCELLED: CANCELLED,
    STATUS_PENDING: NOT_PAID,
}


@dataclass
class CheckinResult:
    outcome: str
    order: Order | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == CHECKED_IN

    @property
    def message(self) -> str:
        return MESSAGES[self.outcome]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "outcome": self.outcome,
            "message": self.message,
            "order": self.order.to_dict() if self.order else None,
        }


def parse_code(raw: str | None) -> str:
    """Accept a typed code or the scanned QR text `<PREFIX>:<code>`."""
    text = str(raw or "").strip()
    prefix = (current_app.config.get("TICKET_QR_PREFIX") or "").upper()
    if prefix and text.upper().startswith(prefix + ":"):
        text = text[len(prefix) + 1:]
    return normalize_order_code(text)


def lookup(raw_code: str | None) -> Order | None:
    code = parse_code(raw_code)
    if not code:
        raise ValidationError("Digite um código de ingresso")
    return Order.query.filter_by(order_code=code).first()


def mark_used(order_id: str, now: datetime | None = None) -> bool:
    """Conditional paid -> used. True only for the caller that flipped it."""
    res = db.session.execute(
        db.update(Order)
        .where(Order.id == order_id, Order.status == STATUS_PAID)
        .values(status=STATUS_USED, used_at=now or datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    return res.rowcount == 1


def validate(raw_code: str | None, now: datetime | None = None) -> CheckinResult:
    order = lookup(raw_code)
    if order is None:
        current_app.logger.warning("Check-in: code %r not found", parse_code(raw_code))
        return CheckinResult(NOT_FOUND)

    rejected = _REJECTED_BY_STATUS.get(order.status)
    if rejected:
        current_app.logger.warning("Check-in rejected for %s: %s", order.order_code, rejected)
        return CheckinResult(rejected, order)

    if not mark_used(order.id, now):
        # lost the race against another check-in (or a cancel)
        db.session.rollback()
        order = db.session.get(Order, order.id, populate_existing=True)
        outcome = _REJECTED_BY_STATUS.get(order.status, ALREADY_USED)
        current_app.logger.warning("Check-in race for %s: %s", order.order_code, outcome)
        return CheckinResult(outcome, order)

    db.session.commit()
    order = db.session.get(Order, order.id, populate_existing=True)
    current_app.logger.info("Check-in %s at %s", order.order_code, order.used_at)
    return CheckinResult(CHECKED_IN, order)
