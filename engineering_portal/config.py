from __future__ import annotations

import os
from typing import Any

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(BASE_DIR)

MAX_UPLOAD_BYTES = 100 * 1024 * 1024
MAX_SCREENSHOT_BYTES = 5 * 1024 * 1024

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".svg"}
PDF_EXTENSIONS = {".pdf"}
SCREENSHOT_EXTENSIONS = {".png", ".jpg", ".jpeg", ".pdf", ".webp"}

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

SESSION_HOURS = 8


def env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> dict[str, Any]:
    return {
        "SECRET_KEY": os.environ.get("SECRET_KEY", "dev-secret-change-me"),
        "SQLALCHEMY_DATABASE_URI": os.environ.get(
            "DATABASE_URL",
            "sqlite:///" + os.path.join(PROJECT_DIR, "portal.db"),
        ),
        "MAX_CONTENT_LENGTH": MAX_UPLOAD_BYTES,
        "PERMANENT_SESSION_LIFETIME": SESSION_HOURS * 3600,
        "SESSION_COOKIE_HTTPONLY": True,
        "UPLOAD_ROOT": os.environ.get("UPLOAD_ROOT", os.path.join(BASE_DIR, "static")),
        "SMTP_HOST": os.environ.get("SMTP_HOST"),
        "SMTP_PORT": int(os.environ.get("SMTP_PORT", "587")),
        "SMTP_USER": os.environ.get("SMTP_USER"),
        "SMTP_PASSWORD": os.environ.get("SMTP_PASSWORD"),
        "SMTP_FROM": os.environ.get("SMTP_FROM", os.environ.get("SMTP_USER", "")),
        "SMTP_FROM_NAME": os.environ.get("SMTP_FROM_NAME", "Mutah Engineering Support"),
        "SMTP_USE_TLS": env_flag("SMTP_USE_TLS", True),
        "GOOGLE_CLIENT_ID": os.environ.get("GOOGLE_CLIENT_ID"),
        "GOOGLE_CLIENT_SECRET": os.environ.get("GOOGLE_CLIENT_SECRET"),
        "GITHUB_CLIENT_ID": os.environ.get("GITHUB_CLIENT_ID"),
        "GITHUB_CLIENT_SECRET": os.environ.get("GITHUB_CLIENT_SECRET"),
        "FACEBOOK_APP_ID": os.environ.get("FACEBOOK_APP_ID"),
        "FACEBOOK_APP_SECRET": os.environ.get("FACEBOOK_APP_SECRET"),
        "ADMIN_USERNAME": os.environ.get("ADMIN_USERNAME", "admin@mutah.edu.jo"),
        "ADMIN_PASSWORD": os.environ.get("ADMIN_PASSWORD", "ChangeMe!123"),
        "ADMIN_FULL_NAME": os.environ.get("ADMIN_FULL_NAME", "Site Administrator"),
        "SEED_ON_STARTUP": env_flag("SEED_ON_STARTUP", True),
        "LOG_LEVEL": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "DEFAULT_CULTURE": os.environ.get("DEFAULT_CULTURE", "ar"),
    }
