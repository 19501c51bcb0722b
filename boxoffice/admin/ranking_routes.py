# boxoffice/admin/ranking_routes.py
from flask import render_template, jsonify
from flask_login import login_required

from boxoffice.services import reports
from . import admin_bp


@admin_bp.route("/ranking")
@login_required
def ranking():
    return render_template("admin/ranking.html", ranking=reports.seller_rankings())


@admin_bp.get("/api/ranking")
@login_required
def ranking_json():
    return jsonify({"ok": True, "ranking": [r.to_dict() for r in reports.seller_rankings()]}), 200
