"""External sign-in through OAuth 2.0 authorization-code providers.

A provider is offered only when its client id and secret are configured.
The flow stores a random ``state`` in the session, sends the browser to the
provider, and on callback exchanges the code for an access token and reads
the user's id, name and email.
"""
from __future__ import annotations

import logging
import secrets
from typing import Any
from urllib.parse import urlencode

import requests
from flask import current_app, session

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 10

PROVIDERS: dict[str, dict[str, Any]] = {
    "google": {
        "label": "Google",
        "id_key": "GOOGLE_CLIENT_ID",
        "secret_key": "GOOGLE_CLIENT_SECRET",
        "authorize_url": "https://accounts.google.com/o/oauth2/v2/auth",
        "token_url": "https://oauth2.googleapis.com/token",
        "userinfo_url": "https://openidconnect.googleapis.com/v1/userinfo",
        "scope": "openid email profile",
    },
    "github": {
        "label": "GitHub",
        "id_key": "GITHUB_CLIENT_ID",
        "secret_key": "GITHUB_CLIENT_SECRET",
        "authorize_url": "https://github.com/login/oauth/authorize",
        "token_url": "https://github.com/login/oauth/access_token",
        "userinfo_url": "https://api.github.com/user",
        "emails_url": "https://api.github.com/user/emails",
        "scope": "read:user user:email",
    },
    "facebook": {
        "label": "Facebook",
        "id_key": "FACEBOOK_APP_ID",
        "secret_key": "FACEBOOK_APP_SECRET",
        "authorize_url": "https://www.facebook.com/v19.0/dialog/oauth",
        "token_url": "https://graph.facebook.com/v19.0/oauth/access_token",
        "userinfo_url": "https://graph.facebook.com/me?fields=id,name,email",
        "scope": "email",
    },
}


class OAuthError(Exception):
    pass


def credentials(name: str) -> tuple[str, str] | None:
    provider = PROVIDERS.get(name)
    if provider is None:
        return None
    client_id = (current_app.config.get(provider["id_key"]) or "").strip()
    client_secret = (current_app.config.get(provider["secret_key"]) or "").strip()
    if not client_id or not client_secret:
        return None
    return client_id, client_secret


def enabled_providers() -> list[dict[str, str]]:
    return [
        {"name": name, "label": provider["label"]}
        for name, provider in PROVIDERS.items()
        if credentials(name)
    ]


def authorization_url(name: str, redirect_uri: str) -> str:
    creds = credentials(name)
    if creds is None:
        raise OAuthError(f"Provider {name!r} is not configured.")

    state = secrets.token_urlsafe(24)
    session["oauth_state"] = state
    session["oauth_provider"] = name

    query = {
        "client_id": creds[0],
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": PROVIDERS[name]["scope"],
        "state": state,
    }
    return f"{PROVIDERS[name]['authorize_url']}?{urlencode(query)}"


def validate_state(name: str, state: str | None) -> None:
    expected = session.pop("oauth_state", None)
    expected_provider = session.pop("oauth_provider", None)
    if not expected or not state or not secrets.compare_digest(expected, state) or expected_provider != name:
        raise OAuthError("Sign-in session expired. Please try again.")


def exchange_code(name: str, code: str, redirect_uri: str) -> str:
    creds = credentials(name)
    if creds is None:
        raise OAuthError(f"Provider {name!r} is not configured.")

    payload = {
        "client_id": creds[0],
        "client_secret": creds[1],
        "code": code,
        "redirect_uri": redirect_uri,
        "grant_type": "authorization_code",
    }
    try:
        response = requests.post(
            PROVIDERS[name]["token_url"],
            data=payload,
            headers={"Accept": "application/json"},
            timeout=HTTP_TIMEOUT,
        )
        response.raise_for_status()
        token = response.json().get("access_token")
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Token exchange with %s failed: %s", name, exc)
        raise OAuthError("Could not complete sign-in with the provider.") from exc

    if not token:
        raise OAuthError("The provider did not return an access token.")
    return token


def fetch_identity(name: str, access_token: str) -> dict[str, str | None]:
    provider = PROVIDERS[name]
    headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}
    try:
        response = requests.get(provider["userinfo_url"], headers=headers, timeout=HTTP_TIMEOUT)
        response.raise_for_status()
        info = response.json()

        email = info.get("email")
        if not email and "emails_url" in provider:
            emails = requests.get(provider["emails_url"], headers=headers, timeout=HTTP_TIMEOUT)
            emails.raise_for_status()
            primary = [row for row in emails.json() if row.get("primary") and row.get("verified")]
            email = primary[0]["email"] if primary else None
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Fetching identity from %s failed: %s", name, exc)
        raise OAuthError("Could not read your profile from the provider.") from exc

    key = info.get("sub") or info.get("id")
    return {
        "provider": provider["label"],
        "provider_key": str(key) if key is not None else None,
        "name": info.get("name") or info.get("login"),
        "email": email,
    }
