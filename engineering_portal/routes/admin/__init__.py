from __future__ import annotations

from flask import Blueprint

from engineering_portal.auth import admin_required

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.before_request
@admin_required
def require_admin():
    return None


from engineering_portal.routes.admin import (  # noqa: E402,F401
    alerts,
    archive,
    dashboard,
    departments,
    exams,
    faculty,
    news,
    support_tickets,
)
