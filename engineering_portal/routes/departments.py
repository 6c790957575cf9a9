from __future__ import annotations

from flask import Blueprint, abort, render_template

from engineering_portal.extensions import db
from engineering_portal.i18n import tr
from engineering_portal.models import Department
from engineering_portal.routes.helpers import contains_any, search_term

bp = Blueprint("departments", __name__, url_prefix="/departments")


@bp.route("")
def index():
    query = search_term()
    stmt = Department.query
    if query:
        stmt = stmt.filter(
            contains_any(
                query,
                Department.code,
                Department.name_ar,
                Department.name_en,
                Department.description_ar,
                Department.description_en,
            )
        )
    departments = stmt.order_by(Department.name_en).all()
    return render_template(
        "departments/index.html",
        page_title=tr("الأقسام", "Departments"),
        departments=departments,
        query=query,
    )


@bp.route("/details/<int:department_id>")
def details(department_id: int):
    department = db.session.get(Department, department_id)
    if department is None:
        abort(404)
    return render_template(
        "departments/details.html",
        page_title=tr(department.name_ar, department.name_en),
        department=department,
    )
