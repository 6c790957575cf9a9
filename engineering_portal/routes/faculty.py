from __future__ import annotations

from flask import Blueprint, abort, render_template, request
from sqlalchemy import or_

from engineering_portal.extensions import db
from engineering_portal.i18n import is_rtl, tr
from engineering_portal.models import Department, FacultyMember
from engineering_portal.routes.helpers import contains_any, department_filter_options, search_term

bp = Blueprint("faculty", __name__, url_prefix="/faculty")


@bp.route("")
def index():
    query = search_term()
    dep = request.args.get("dep", "").strip()

    stmt = FacultyMember.query.join(Department)
    if dep:
        stmt = stmt.filter(or_(Department.code == dep, Department.name_ar == dep, Department.name_en == dep))
    if query:
        stmt = stmt.filter(
            contains_any(
                query,
                FacultyMember.full_name_ar,
                FacultyMember.full_name_en,
                FacultyMember.title_ar,
                FacultyMember.title_en,
                FacultyMember.email,
            )
        )

    name_column = FacultyMember.full_name_ar if is_rtl() else FacultyMember.full_name_en
    members = stmt.order_by(Department.code, name_column).all()
    return render_template(
        "faculty/index.html",
        page_title=tr("أعضاء هيئة التدريس", "Faculty Members"),
        members=members,
        query=query,
        dep=dep,
        department_options=department_filter_options(),
    )


@bp.route("/details/<int:member_id>")
def details(member_id: int):
    member = db.session.get(FacultyMember, member_id)
    if member is None:
        abort(404)
    return render_template(
        "faculty/details.html",
        page_title=tr(member.full_name_ar, member.full_name_en),
        member=member,
    )
