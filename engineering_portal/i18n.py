from __future__ import annotations

from flask import current_app, g, request, session

SUPPORTED_CULTURES = {"ar": "ar-JO", "en": "en-US"}
RTL_CULTURES = {"ar"}


def normalize_culture(raw: str | None) -> str | None:
    if not raw:
        return None
    short = raw.strip().lower().split("-")[0]
    return short if short in SUPPORTED_CULTURES else None


def select_culture() -> None:
    # ?culture=en-US (or ui-culture) switches language and is remembered.
    requested = normalize_culture(request.args.get("culture") or request.args.get("ui-culture"))
    if requested:
        session["culture"] = requested

    g.culture = (
        normalize_culture(session.get("culture"))
        or normalize_culture(current_app.config.get("DEFAULT_CULTURE"))
        or "ar"
    )


def current_culture() -> str:
    return g.get("culture") or "ar"


def is_rtl() -> bool:
    return current_culture() in RTL_CULTURES


def tr(arabic: str | None, english: str | None) -> str:
    primary, fallback = (arabic, english) if is_rtl() else (english, arabic)
    return primary or fallback or ""
