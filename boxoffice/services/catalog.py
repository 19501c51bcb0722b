# boxoffice/services/catalog.py
"""
Ticket products on sale.

One in-process table of products; the deployment picks which entries are
enabled (CATALOG_PRODUCTS) or swaps the table for a JSON file (CATALOG_FILE).
Orders keep a snapshot of name/price, so editing the catalog never rewrites
order history.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation

from flask import current_app

from boxoffice.errors import ValidationError
from boxoffice.models.setting import PIX_KEY


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: Decimal
    icon: str = "🎟️"
    ticket_count: int = 1      # seats consumed by one purchase
    popular: bool = False
    pix_payload: str | None = None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["price"] = float(self.price)
        return d


BUILTIN_PRODUCTS: dict[str, Product] = {
    "single": Product(
        id="single",
        name="Ingresso Individual",
        description="Entrada para a sessão",
        price=Decimal("7.00"),
        icon="🎬",
    ),
    "combo_individual": Product(
        id="combo_individual",
        name="Combo Individual",
        description="Ingresso + Pipoca + Refri",
        price=Decimal("10.00"),
        icon="🍿",
        popular=True,
    ),
    "combo_couple": Product(
        id="combo_couple",
        name="Combo Casal",
        description="2 Ingressos + 2 Pipocas + 2 Refris",
        price=Decimal("18.00"),
        icon="💑",
        ticket_count=2,
    ),
}


def _to_decimal(val, field: str) -> Decimal:
    try:
        return Decimal(str(val)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid {field}: {val!r}")


def _product_from_dict(raw: dict) -> Product:
    pid = str(raw.get("id") or "").strip()
    if not pid:
        raise ValueError("Catalog entry without id")
    count = int(raw.get("ticket_count", 1))
    if count < 1:
        raise ValueError(f"ticket_count must be >= 1 for {pid}")
    return Product(
        id=pid,
        name=str(raw.get("name") or pid).strip(),
        description=str(raw.get("description") or "").strip(),
        price=_to_decimal(raw.get("price"), "price"),
        icon=str(raw.get("icon") or "🎟️"),
        ticket_count=count,
        popular=bool(raw.get("popular", False)),
        pix_payload=(raw.get("pix_payload") or None),
    )


def load_catalog_file(path: str) -> dict[str, Product]:
    """Read a JSON list (or {"products": [...]}) of catalog entries."""
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("products") or []
    products = [_product_from_dict(item) for item in data]
    return {p.id: p for p in products}


def _configured_table() -> dict[str, Product]:
    cfg = current_app.config
    cached = current_app.extensions.get("boxoffice.catalog")
    if cached is not None:
        return cached

    path = cfg.get("CATALOG_FILE")
    table = load_catalog_file(path) if path else dict(BUILTIN_PRODUCTS)

    enabled = cfg.get("CATALOG_PRODUCTS") or []
    if enabled:
        missing = [pid for pid in enabled if pid not in table]
        if missing:
            current_app.logger.warning("CATALOG_PRODUCTS lists unknown ids: %s", ", ".join(missing))
        table = {pid: table[pid] for pid in enabled if pid in table}

    if not table:
        raise RuntimeError("Catalog is empty: check CATALOG_PRODUCTS / CATALOG_FILE.")

    current_app.extensions["boxoffice.catalog"] = table
    return table


def list_products() -> list[Product]:
    return list(_configured_table().values())


def get_product(product_id: str | None) -> Product:
    pid = (product_id or "").strip()
    product = _configured_table().get(pid)
    if product is None:
        raise ValidationError("Produto inválido ou indisponível.")
    return product


def payment_info(product: Product | None = None) -> dict:
    """PIX key (settings row wins over config) and copy-paste payload."""
    from boxoffice.services.inventory import get_setting

    cfg = current_app.config
    key = get_setting(PIX_KEY) or cfg.get("PIX_KEY") or ""
    payload = (product.pix_payload if product else None) or cfg.get("PIX_PAYLOAD") or ""
    return {"pix_key": key, "pix_payload": payload}
