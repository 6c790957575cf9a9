from __future__ import annotations

import logging
import uuid
from functools import wraps
from urllib.parse import urlparse

from flask import abort, current_app, flash, g, redirect, request, session, url_for
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.wrappers import Response

from engineering_portal.config import SESSION_HOURS
from engineering_portal.extensions import db
from engineering_portal.models import Role, User

logger = logging.getLogger(__name__)

AUTH_COOKIE = "portal_auth"
SESSION_KEYS = ("user_id", "username", "user_full_name", "user_role")


def cookie_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt="portal-auth-cookie")


def user_claims(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "username": user.username,
        "name": user.display_name,
        "role": user.role.value,
    }


def write_session(user: User) -> None:
    session.permanent = True
    session["user_id"] = user.id
    session["username"] = user.username
    session["user_full_name"] = user.display_name
    session["user_role"] = user.role.value


def clear_session() -> None:
    for key in SESSION_KEYS:
        session.pop(key, None)
    g.current_user = None


def sign_in(user: User, response: Response) -> Response:
    write_session(user)
    g.current_user = user
    response.set_cookie(
        AUTH_COOKIE,
        cookie_serializer().dumps(user_claims(user)),
        max_age=SESSION_HOURS * 3600,
        httponly=True,
        samesite="Lax",
    )
    logger.info("User %s signed in (provider=%s)", user.username, user.provider or "local")
    return response


def sign_out(response: Response) -> Response:
    clear_session()
    response.delete_cookie(AUTH_COOKIE)
    return response


def user_from_auth_cookie() -> User | None:
    token = request.cookies.get(AUTH_COOKIE)
    if not token:
        return None
    try:
        claims = cookie_serializer().loads(token, max_age=SESSION_HOURS * 3600)
    except (BadSignature, SignatureExpired):
        logger.warning("Rejected invalid auth cookie")
        return None
    user_id = claims.get("id") if isinstance(claims, dict) else None
    if not isinstance(user_id, int):
        return None
    return db.session.get(User, user_id)


def current_user() -> User | None:
    if "current_user" in g:
        return g.current_user

    user_id = session.get("user_id")
    user = db.session.get(User, user_id) if user_id else None
    if user is None and user_id is None:
        user = user_from_auth_cookie()
        if user is not None:
            write_session(user)
    if user is None and user_id is not None:
        clear_session()

    g.current_user = user
    return user


def is_admin() -> bool:
    user = current_user()
    return bool(user and user.role == Role.ADMIN)


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user():
            flash("Please login first.", "warning")
            return redirect(url_for("account.login", return_url=request.path))
        return view(*args, **kwargs)

    return wrapped


def role_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            user = current_user()
            if not user or user.role not in roles:
                logger.warning(
                    "Forbidden %s %s for %s",
                    request.method,
                    request.path,
                    user.username if user else "anonymous",
                )
                abort(403)
            return view(*args, **kwargs)

        return wrapped

    return decorator


admin_required = role_required(Role.ADMIN)


def is_local_url(target: str | None) -> bool:
    if not target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc and target.startswith("/") and not target.startswith("//")


def safe_redirect_target(target: str | None, fallback_endpoint: str = "home.index") -> str:
    if is_local_url(target):
        return target
    return url_for(fallback_endpoint)


def link_external_user(
    provider: str,
    provider_key: str | None,
    display_name: str | None,
    email: str | None,
) -> User:
    provider_key = (provider_key or "").strip() or uuid.uuid4().hex
    email = (email or "").strip() or None
    username = email or provider_key

    user = User.query.filter_by(provider=provider, provider_key=provider_key).first()
    if user is not None:
        return user

    user = User.query.filter_by(username=username).first()
    if user is None:
        user = User(
            username=username,
            full_name=display_name or username,
            role=Role.USER,
            provider=provider,
            provider_key=provider_key,
        )
        db.session.add(user)
        logger.info("Created external user %s via %s", username, provider)
    else:
        user.provider = provider
        user.provider_key = provider_key
        logger.info("Linked existing user %s to %s", username, provider)

    db.session.commit()
    return user
