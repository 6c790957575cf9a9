from __future__ import annotations

from typing import Any

from flask import abort, request
from sqlalchemy import func, or_

from engineering_portal.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from engineering_portal.extensions import db
from engineering_portal.forms import flag_or_default
from engineering_portal.i18n import is_rtl
from engineering_portal.models import Department


def search_term() -> str:
    return request.args.get("q", "").strip()


def contains_any(term: str, *columns: Any):
    like = f"%{term.lower()}%"
    return or_(*[func.lower(func.coalesce(column, "")).like(like) for column in columns])


def page_args() -> tuple[int, int]:
    page = request.args.get("page", 1, type=int) or 1
    page_size = request.args.get("page_size", DEFAULT_PAGE_SIZE, type=int) or DEFAULT_PAGE_SIZE
    if page < 1:
        page = 1
    if page_size <= 0 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def flag_arg(name: str, default: bool) -> bool:
    return flag_or_default(request.args, name, default)


def department_choices() -> list[tuple[int, str]]:
    departments = Department.query.order_by(Department.name_en).all()
    return [(dep.id, dep.name_ar if is_rtl() else dep.name_en) for dep in departments]


def department_filter_options() -> dict[str, tuple[str, str]]:
    departments = Department.query.order_by(Department.name_en).all()
    return {(dep.code or dep.name_en): (dep.name_ar, dep.name_en) for dep in departments}


def paginate(stmt):
    page, page_size = page_args()
    return stmt.paginate(page=page, per_page=page_size, error_out=False)


def get_or_404(model, item_id: int):
    item = db.session.get(model, item_id)
    if item is None:
        abort(404)
    return item
