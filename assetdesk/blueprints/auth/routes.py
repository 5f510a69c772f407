"""
Routes for the auth blueprint — login and logout.

The login form checks the submitted email and password against the
hashed administrator account created by ``flask seed-admin``.
"""

from flask import flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from assetdesk.blueprints.auth import bp
from assetdesk.errors import ValidationError
from assetdesk.services import auth_service


@bp.route("/login", methods=["GET", "POST"])
def login():
    """Render the login form and sign the administrator in."""
    if current_user.is_authenticated:
        return redirect(url_for("main.dashboard"))

    if request.method == "POST":
        try:
            email, password = auth_service.clean_login_form(request.form)
        except ValidationError as exc:
            for error in exc.errors:
                flash(error, "danger")
            return render_template("auth/login.html", form_data=request.form), 400

        user = auth_service.verify_credentials(email, password)
        if user is None:
            flash("Invalid email or password.", "danger")
            return render_template("auth/login.html", form_data=request.form), 401

        login_user(user)
        auth_service.record_login(user)
        flash(f"Welcome, {user.name}!", "success")

        # Only follow relative redirects back into the app.
        next_url = request.args.get("next", "")
        if next_url.startswith("/") and not next_url.startswith("//"):
            return redirect(next_url)
        return redirect(url_for("main.dashboard"))

    return render_template("auth/login.html", form_data={})


@bp.route("/logout")
@login_required
def logout():
    """Sign the administrator out and return to the login page."""
    auth_service.clear_session()
    logout_user()
    flash("You have been signed out.", "info")
    return redirect(url_for("auth.login"))
