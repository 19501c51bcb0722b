import json
from decimal import Decimal

import pytest

from boxoffice.errors import ValidationError
from boxoffice.services import catalog, inventory


def test_enabled_products_keep_configured_order(ctx):
    ids = [p.id for p in catalog.list_products()]
    assert ids == ["single", "combo_individual", "combo_couple"]


def test_combo_individual_entry(ctx):
    p = catalog.get_product("combo_individual")
    assert p.name == "Combo Individual"
    assert p.description == "Ingresso + Pipoca + Refri"
    assert p.price == Decimal("10.00")
    assert p.ticket_count == 1
    assert p.popular is True


def test_couple_product_consumes_two_tickets(ctx):
    assert catalog.get_product("combo_couple").ticket_count == 2


def test_unknown_product_is_a_validation_error(ctx):
    with pytest.raises(ValidationError):
        catalog.get_product("vip_backstage")
    with pytest.raises(ValidationError):
        catalog.get_product(None)


def test_disabled_product_is_not_sold(app):
    app.config["CATALOG_PRODUCTS"] = ["combo_individual"]
    with app.app_context():
        assert [p.id for p in catalog.list_products()] == ["combo_individual"]
        with pytest.raises(ValidationError):
            catalog.get_product("single")


def test_catalog_file_replaces_builtin_table(app, tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"products": [
        {"id": "meia", "name": "Meia Entrada", "price": "5", "ticket_count": 1},
        {"id": "familia", "name": "Família", "price": 30, "ticket_count": 4, "pix_payload": "PIXFAM"},
    ]}), encoding="utf-8")
    app.config["CATALOG_FILE"] = str(path)
    app.config["CATALOG_PRODUCTS"] = []

    with app.app_context():
        products = catalog.list_products()
        assert [p.id for p in products] == ["meia", "familia"]
        fam = catalog.get_product("familia")
        assert fam.price == Decimal("30.00")
        assert fam.ticket_count == 4
        assert catalog.payment_info(fam)["pix_payload"] == "PIXFAM"


def test_enabled_ids_also_filter_catalog_file(app, tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([
        {"id": "meia", "name": "Meia Entrada", "price": 5},
        {"id": "inteira", "name": "Inteira", "price": 10},
    ]), encoding="utf-8")
    app.config["CATALOG_FILE"] = str(path)
    app.config["CATALOG_PRODUCTS"] = ["inteira", "single"]

    with app.app_context():
        assert [p.id for p in catalog.list_products()] == ["inteira"]
        with pytest.raises(ValidationError):
            catalog.get_product("meia")


def test_catalog_file_rejects_zero_ticket_count(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"id": "x", "price": 1, "ticket_count": 0}]), encoding="utf-8")
    with pytest.raises(ValueError):
        catalog.load_catalog_file(str(path))


def test_pix_key_setting_wins_over_config(ctx):
    assert catalog.payment_info()["pix_key"] == "cinejuventude@email.com"
    inventory.set_setting("pix_key", "090.957.113-90")
    info = catalog.payment_info(catalog.get_product("single"))
    assert info["pix_key"] == "090.957.113-90"
    assert info["pix_payload"] == "00020126PIXPAYLOAD"
