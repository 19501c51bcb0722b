# boxoffice/auth/login_routes.py
# Admin login/logout; credentials are checked on the server against bcrypt hashes.
from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, logout_user, login_required

from boxoffice.models.user import User

auth_bp = Blueprint("auth", __name__, url_prefix="/admin")


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """Login form; on success goes to ?next= or the dashboard."""
    if request.method == "POST":
        username = (request.form.get("username") or "").strip()
        password = (request.form.get("password") or "").strip()

        user = User.query.filter_by(username=username).first()

        if user and user.is_admin and user.check_password(password):
            login_user(user)
            current_app.logger.info("Admin %s logged in", username)
            flash("Login realizado.", "success")
            nxt = request.args.get("next") or ""
            # only local redirects
            if not nxt.startswith("/") or nxt.startswith("//"):
                nxt = url_for("admin.dashboard")
            return redirect(nxt)

        current_app.logger.warning("Failed admin login for %r", username)
        flash("Senha incorreta!", "danger")
        return render_template("admin/auth/login.html", username=username), 401

    return render_template("admin/auth/login.html", username="")


@auth_bp.route("/logout", methods=["GET", "POST"])
@login_required
def logout():
    logout_user()
    flash("Você saiu do painel.", "info")
    return redirect(url_for("auth.login"))
