# boxoffice/admin/routes.py
from datetime import datetime

from flask import render_template, request, redirect, url_for, flash, send_file, current_app
from flask_login import login_required

from boxoffice.errors import BoxOfficeError
from boxoffice.models.order import STATUSES
from boxoffice.services import inventory, orders, reports
from . import admin_bp


def _filters():
    return {
        "q": (request.args.get("q") or "").strip(),
        "status": (request.args.get("status") or "all").strip(),
    }


@admin_bp.route("/")
@login_required
def dashboard():
    filters = _filters()
    try:
        rows = orders.search_orders(filters["q"], filters["status"])
    except BoxOfficeError as e:
        flash(e.message, "danger")
        filters["status"] = "all"
        rows = orders.search_orders(filters["q"])

    return render_template(
        "admin/dashboard.html",
        orders=rows,
        stats=reports.dashboard_stats(),
        inventory=inventory.snapshot(),
        filters=filters,
        statuses=STATUSES,
    )


@admin_bp.post("/orders/<order_id>/cancel")
@login_required
def cancel_order(order_id):
    try:
        order = orders.cancel_order(order_id)
    except BoxOfficeError as e:
        flash(e.message, "danger")
    else:
        flash(f"Pedido {order.order_code} cancelado", "success")
    return redirect(request.referrer or url_for("admin.dashboard"))


@admin_bp.route("/orders/<order_id>/receipt")
@login_required
def view_receipt(order_id):
    try:
        order = orders.get_order(order_id)
    except BoxOfficeError as e:
        flash(e.message, "danger")
        return redirect(url_for("admin.dashboard"))
    if not order.receipt_url:
        flash("Pedido sem comprovante.", "warning")
        return redirect(url_for("admin.dashboard"))
    return redirect(order.receipt_url)


@admin_bp.route("/orders/export.xlsx")
@login_required
def export_orders():
    filters = _filters()
    try:
        rows = orders.search_orders(filters["q"], filters["status"], limit=5000)
    except BoxOfficeError as e:
        flash(e.message, "danger")
        return redirect(url_for("admin.dashboard"))

    bio = reports.export_orders_xlsx(rows)
    current_app.logger.info("Exported %s orders", len(rows))
    return send_file(
        bio,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=f"pedidos_{datetime.utcnow():%Y%m%d_%H%M}.xlsx",
    )
