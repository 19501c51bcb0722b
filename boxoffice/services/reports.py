# boxoffice/services/reports.py
"""Admin numbers: dashboard totals, seller ranking, XLSX export."""
from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import openpyxl
from openpyxl.utils import get_column_letter
from sqlalchemy import and_, func

from boxoffice.extensions import db
from boxoffice.models import Order, Seller
from boxoffice.models.order import STATUS_CANCELLED, STATUS_USED


def _to_dec(x) -> Decimal:
    try:
        return Decimal(str(x))
    except Exception:
        return Decimal("0")


@dataclass
class SellerRanking:
    seller: Seller
    sales: int
    revenue: Decimal

    def to_dict(self) -> dict:
        d = self.seller.to_dict()
        d.update({"sales": self.sales, "revenue": float(self.revenue)})
        return d


@dataclass
class DashboardStats:
    revenue: Decimal
    orders: int
    used: int

    def to_dict(self) -> dict:
        return {"revenue": float(self.revenue), "orders": self.orders, "used": self.used}


def seller_rankings() -> list[SellerRanking]:
    """
    Sales count and revenue per seller over non-cancelled orders, computed
    from the orders table (Seller.total_sales is not used here).
    """
    rows = (
        db.session.query(
            Seller,
            func.count(Order.id),
            func.coalesce(func.sum(Order.price), 0),
        )
        .outerjoin(Order, and_(Order.seller_id == Seller.id, Order.status != STATUS_CANCELLED))
        .group_by(Seller.id)
        .all()
    )
    ranking = [SellerRanking(seller=s, sales=int(n or 0), revenue=_to_dec(total)) for s, n, total in rows]
    ranking.sort(key=lambda r: (-r.sales, -r.revenue, r.seller.name.lower()))
    return ranking


def dashboard_stats() -> DashboardStats:
    revenue, count = (
        db.session.query(func.coalesce(func.sum(Order.price), 0), func.count(Order.id))
        .filter(Order.status != STATUS_CANCELLED)
        .one()
    )
    used = Order.query.filter(Order.status == STATUS_USED).count()
    return DashboardStats(revenue=_to_dec(revenue), orders=int(count or 0), used=int(used))


EXPORT_HEADERS = [
    "Código", "Cliente", "WhatsApp", "Vendedor", "Produto",
    "Valor (R$)", "Status", "Comprovante", "Criado em", "Utilizado em",
]


def export_orders_xlsx(orders: list[Order]) -> io.BytesIO:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Pedidos"
    ws.append(EXPORT_HEADERS)

    for o in orders:
        ws.append([
            o.order_code,
            o.customer_name,
            o.customer_whatsapp,
            o.seller.name if o.seller else "",
            o.product_name,
            float(o.price) if o.price is not None else None,
            o.status,
            o.receipt_url or "",
            o.created_at.strftime("%Y-%m-%d %H:%M") if isinstance(o.created_at, datetime) else "",
            o.used_at.strftime("%Y-%m-%d %H:%M") if isinstance(o.used_at, datetime) else "",
        ])

    # column widths
    for col_idx, _ in enumerate(EXPORT_HEADERS, start=1):
        max_len = 0
        for row in ws.iter_rows(min_col=col_idx, max_col=col_idx):
            cell = row[0]
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 2, 50)

    bio = io.BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio
