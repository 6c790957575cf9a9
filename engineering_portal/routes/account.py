from __future__ import annotations

import logging

from flask import Blueprint, flash, redirect, render_template, request, session, url_for

from engineering_portal.auth import current_user, link_external_user, login_required, safe_redirect_target, sign_in, sign_out
from engineering_portal.extensions import db
from engineering_portal.forms import register_form
from engineering_portal.i18n import tr
from engineering_portal.models import Role, User
from engineering_portal.oauth import OAuthError, authorization_url, exchange_code, fetch_identity, validate_state

logger = logging.getLogger(__name__)

bp = Blueprint("account", __name__, url_prefix="/account")


def return_url_arg() -> str | None:
    return request.values.get("return_url") or None


def render_signup(values, errors, return_url):
    return render_template(
        "account/signup.html",
        page_title=tr("إنشاء حساب", "Sign Up"),
        values=values,
        errors=errors,
        return_url=return_url,
    )


def render_login(values, errors, return_url):
    return render_template(
        "account/login.html",
        page_title=tr("تسجيل الدخول", "Sign In"),
        values=values,
        errors=errors,
        return_url=return_url,
    )


@bp.route("/signup", methods=["GET", "POST"])
def signup():
    return_url = return_url_arg()
    if request.method == "GET":
        return render_signup({}, {}, return_url)

    data, errors = register_form(request.form)
    if not errors and User.query.filter_by(username=data["phone"]).first():
        errors["phone"] = "Phone number is already registered."

    if errors:
        return render_signup(request.form, errors, return_url)

    user = User(username=data["phone"], full_name=data["full_name"], role=Role.USER)
    user.set_password(data["password"])
    db.session.add(user)
    db.session.commit()
    logger.info("Registered local user %s", user.username)

    flash(tr("مرحبًا بك!", "Welcome!"), "success")
    return sign_in(user, redirect(safe_redirect_target(return_url)))


@bp.route("/login", methods=["GET", "POST"])
def login():
    return_url = return_url_arg()
    if request.method == "GET":
        return render_login({}, {}, return_url)

    phone = request.form.get("phone", "").strip()
    password = request.form.get("password", "")

    errors: dict[str, str] = {}
    if not phone:
        errors["phone"] = "Phone number is required."
    if not password:
        errors["password"] = "Password is required."
    if errors:
        return render_login(request.form, errors, return_url)

    user = User.query.filter_by(username=phone).first()
    if user is None or not user.check_password(password):
        logger.warning("Failed login for %s", phone)
        errors["__all__"] = "Invalid login details."
        return render_login(request.form, errors, return_url)

    flash(tr("تم تسجيل الدخول.", "Signed in."), "success")
    return sign_in(user, redirect(safe_redirect_target(return_url)))


@bp.route("/logout", methods=["POST"])
def logout():
    flash(tr("تم تسجيل الخروج.", "You have been logged out."), "info")
    return sign_out(redirect(url_for("home.welcome")))


@bp.route("/delete-and-logout", methods=["POST"])
@login_required
def delete_and_logout():
    user = current_user()
    logger.info("Deleting account %s on request", user.username)
    db.session.delete(user)
    db.session.commit()
    return sign_out(redirect(url_for("home.welcome")))


@bp.route("/external-login", methods=["POST"])
def external_login():
    provider = request.form.get("provider", "").strip().lower()
    session["oauth_return_url"] = return_url_arg()
    callback = url_for("account.external_login_callback", provider=provider, _external=True)
    try:
        target = authorization_url(provider, callback)
    except OAuthError as exc:
        flash(str(exc), "danger")
        return redirect(url_for("account.login"))
    return redirect(target)


@bp.route("/external-login/callback/<provider>")
def external_login_callback(provider: str):
    return_url = session.pop("oauth_return_url", None)
    if request.args.get("error"):
        flash(tr("تم إلغاء تسجيل الدخول.", "Sign-in was cancelled."), "warning")
        return redirect(url_for("account.login", return_url=return_url))

    callback = url_for("account.external_login_callback", provider=provider, _external=True)
    try:
        validate_state(provider, request.args.get("state"))
        token = exchange_code(provider, request.args.get("code", ""), callback)
        identity = fetch_identity(provider, token)
    except OAuthError as exc:
        flash(str(exc), "danger")
        return redirect(url_for("account.login", return_url=return_url))

    user = link_external_user(
        identity["provider"],
        identity["provider_key"],
        identity["name"],
        identity["email"],
    )
    flash(tr("تم تسجيل الدخول.", "Signed in."), "success")
    return sign_in(user, redirect(safe_redirect_target(return_url)))
