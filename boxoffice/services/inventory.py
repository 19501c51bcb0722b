# boxoffice/services/inventory.py
"""
"Tickets sold" counter and the key/value settings it lives in.

The counter only goes up. Increments are compare-and-swap updates on the
settings row, so two checkouts finishing together can't lose an update.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from boxoffice.errors import StoreError, ValidationError
from boxoffice.extensions import db
from boxoffice.models.setting import Setting, TICKETS_SOLD, TICKETS_TOTAL, PIX_KEY

WRITABLE_KEYS = (TICKETS_TOTAL, PIX_KEY)


@dataclass(frozen=True)
class InventorySnapshot:
    sold: int
    total: int

    @property
    def remaining(self) -> int:
        return max(self.total - self.sold, 0)

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 100.0
        return round(min(self.sold / self.total * 100, 100.0), 1)

    def to_dict(self) -> dict:
        return {
            "sold": self.sold,
            "total": self.total,
            "remaining": self.remaining,
            "percentage": self.percentage,
        }


def _to_int(value, default: int = 0) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


# --- settings ---------------------------------------------------------------

def get_setting(key: str, default: str | None = None) -> str | None:
    value = db.session.execute(
        db.select(Setting.value).where(Setting.key == key)
    ).scalar_one_or_none()
    return value if value is not None else default


def set_setting(key: str, value) -> Setting:
    """Upsert a settings row. The sold counter is not writable from here."""
    if key == TICKETS_SOLD:
        raise ValidationError("tickets_sold só pode ser incrementado por uma compra.")
    if key not in WRITABLE_KEYS:
        raise ValidationError(f"Chave de configuração desconhecida: {key}")
    if key == TICKETS_TOTAL and _to_int(value, -1) < 0:
        raise ValidationError("tickets_total precisa ser um número >= 0.")

    row = Setting.query.filter_by(key=key).first()
    if row is None:
        row = Setting(key=key, value=str(value))
        db.session.add(row)
    else:
        row.value = str(value)
    db.session.commit()
    current_app.logger.info("Setting %s updated", key)
    return row


def ensure_defaults() -> list[str]:
    """Create missing settings rows; returns the keys that were created."""
    cfg = current_app.config
    defaults = {
        TICKETS_SOLD: "0",
        TICKETS_TOTAL: str(cfg.get("TICKETS_TOTAL", 100)),
        PIX_KEY: cfg.get("PIX_KEY") or "",
    }
    existing = {
        k for (k,) in db.session.execute(db.select(Setting.key)).all()
    }
    created = []
    for key, value in defaults.items():
        if key not in existing:
            db.session.add(Setting(key=key, value=value))
            created.append(key)
    db.session.commit()
    return created


# --- counter ----------------------------------------------------------------

def sold() -> int:
    return _to_int(get_setting(TICKETS_SOLD), 0)


def total() -> int:
    raw = get_setting(TICKETS_TOTAL)
    if raw is None:
        return int(current_app.config.get("TICKETS_TOTAL", 100))
    return _to_int(raw, int(current_app.config.get("TICKETS_TOTAL", 100)))


def snapshot() -> InventorySnapshot:
    return InventorySnapshot(sold=sold(), total=total())


def increment(n: int = 1) -> int:
    """
    Add n to tickets_sold inside the caller's transaction and return the new
    value. Does not commit.
    """
    if n < 1:
        raise ValueError("increment must be >= 1")

    attempts = int(current_app.config.get("COUNTER_CAS_ATTEMPTS", 10))
    for _ in range(max(attempts, 1)):
        current = get_setting(TICKETS_SOLD)

        if current is None:
            # first sale ever; a concurrent creator trips the unique key and the order rolls back
            db.session.add(Setting(key=TICKETS_SOLD, value=str(n)))
            db.session.flush()
            return n

        new_value = _to_int(current, 0) + n
        res = db.session.execute(
            db.update(Setting)
            .where(Setting.key == TICKETS_SOLD, Setting.value == current)
            .values(value=str(new_value))
            .execution_options(synchronize_session=False)
        )
        if res.rowcount == 1:
            return new_value

        current_app.logger.info("tickets_sold changed under us (was %s), retrying", current)

    raise StoreError("Não foi possível atualizar o contador de ingressos. Tente novamente.")
