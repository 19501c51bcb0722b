from datetime import datetime

import pytest

from boxoffice.errors import StoreError, ValidationError
from boxoffice.extensions import db
from boxoffice.models import Setting
from boxoffice.services import inventory
from boxoffice.services.inventory import InventorySnapshot


def test_snapshot_clamps_when_oversold():
    snap = InventorySnapshot(sold=120, total=100)
    assert snap.remaining == 0
    assert snap.percentage == 100.0


def test_snapshot_regular_and_zero_total():
    assert InventorySnapshot(sold=15, total=100).to_dict() == {
        "sold": 15, "total": 100, "remaining": 85, "percentage": 15.0,
    }
    assert InventorySnapshot(sold=0, total=0).percentage == 100.0


def test_total_falls_back_to_config_without_row(ctx):
    assert inventory.total() == 100
    inventory.set_setting("tickets_total", "250")
    assert inventory.total() == 250


def test_increment_creates_row_then_adds(ctx):
    assert inventory.sold() == 0
    assert inventory.increment(1) == 1
    db.session.commit()
    assert inventory.increment(2) == 3
    db.session.commit()
    assert inventory.sold() == 3


def test_increment_rejects_non_positive(ctx):
    with pytest.raises(ValueError):
        inventory.increment(0)


def test_sold_counter_is_not_writable(ctx):
    with pytest.raises(ValidationError):
        inventory.set_setting("tickets_sold", "0")
    with pytest.raises(ValidationError):
        inventory.set_setting("unknown_key", "x")
    with pytest.raises(ValidationError):
        inventory.set_setting("tickets_total", "-5")


def test_ensure_defaults_only_creates_missing(ctx):
    inventory.set_setting("tickets_total", "42")
    created = inventory.ensure_defaults()
    assert set(created) == {"tickets_sold", "pix_key"}
    assert inventory.total() == 42
    assert inventory.ensure_defaults() == []


def test_increment_retries_after_concurrent_write(ctx, monkeypatch):
    db.session.add(Setting(key="tickets_sold", value="5"))
    db.session.commit()

    real_get = inventory.get_setting
    reads = []

    def stale_first(key, default=None):
        reads.append(key)
        # first read sees the value from before another checkout committed
        if len(reads) == 1:
            return "4"
        return real_get(key, default)

    monkeypatch.setattr(inventory, "get_setting", stale_first)
    assert inventory.increment(1) == 6
    db.session.commit()
    monkeypatch.setattr(inventory, "get_setting", real_get)
    assert inventory.sold() == 6
    assert len(reads) == 2


def test_increment_gives_up_after_bounded_attempts(ctx, monkeypatch):
    db.session.add(Setting(key="tickets_sold", value="5"))
    db.session.commit()
    monkeypatch.setattr(inventory, "get_setting", lambda key, default=None: "1")
    with pytest.raises(StoreError):
        inventory.increment(1)


def test_increment_refreshes_updated_at(ctx):
    db.session.add(Setting(key="tickets_sold", value="3", updated_at=datetime(2000, 1, 1)))
    db.session.commit()

    assert inventory.increment(2) == 5
    db.session.commit()

    row = db.session.execute(db.select(Setting).where(Setting.key == "tickets_sold")).scalar_one()
    db.session.refresh(row)
    assert row.value == "5"
    assert row.updated_at > datetime(2000, 1, 1)
