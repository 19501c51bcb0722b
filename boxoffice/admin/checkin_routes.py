# boxoffice/admin/checkin_routes.py
from flask import render_template, request, jsonify, flash, current_app
from flask_login import login_required

from boxoffice.errors import BoxOfficeError, StoreError
from boxoffice.extensions import db
from boxoffice.services import checkin
from . import admin_bp

_HTTP_BY_OUTCOME = {
    checkin.CHECKED_IN: 200,
    checkin.NOT_FOUND: 404,
    checkin.ALREADY_USED: 409,
    checkin.CANCELLED: 409,
    checkin.NOT_PAID: 409,
}


@admin_bp.route("/checkin", methods=["GET", "POST"])
@login_required
def checkin_page():
    """GET ?code=... looks the ticket up, POST performs the check-in."""
    code = (request.values.get("code") or "").strip()
    order = None

    if request.method == "POST":
        try:
            result = checkin.validate(code)
        except BoxOfficeError as e:
            flash(e.message, "danger")
            return render_template("admin/checkin.html", code=code, order=None), e.status_code
        except Exception:
            db.session.rollback()
            current_app.logger.exception("check-in failed for %r", code)
            flash(StoreError.default_message, "danger")
            return render_template("admin/checkin.html", code=code, order=None), 500
        flash(result.message, "success" if result.ok else "danger")
        return render_template("admin/checkin.html", code=code, order=result.order)

    if code:
        try:
            order = checkin.lookup(code)
        except BoxOfficeError as e:
            flash(e.message, "danger")
        else:
            if order is None:
                flash(checkin.MESSAGES[checkin.NOT_FOUND], "danger")
    return render_template("admin/checkin.html", code=code, order=order)


@admin_bp.post("/api/checkin")
@login_required
def checkin_json():
    """Scanner endpoint. Body: {"code": "CJ-..."} or the raw QR text."""
    data = request.get_json(silent=True) or {}
    code = data.get("code") or request.form.get("code")
    try:
        result = checkin.validate(code)
    except BoxOfficeError as e:
        return jsonify({"ok": False, "error": e.message}), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception("check-in failed for %r", code)
        return jsonify({"ok": False, "error": StoreError.default_message}), 500
    return jsonify(result.to_dict()), _HTTP_BY_OUTCOME[result.outcome]


@admin_bp.get("/api/checkin")
@login_required
def checkin_lookup_json():
    try:
        order = checkin.lookup(request.args.get("code"))
    except BoxOfficeError as e:
        return jsonify({"ok": False, "error": e.message}), e.status_code
    if order is None:
        return jsonify({"ok": False, "error": checkin.MESSAGES[checkin.NOT_FOUND]}), 404
    return jsonify({"ok": True, "order": order.to_dict()}), 200
