from __future__ import annotations

from datetime import timedelta

from flask import Blueprint, abort, render_template, request
from sqlalchemy import or_

from engineering_portal.extensions import db
from engineering_portal.i18n import tr
from engineering_portal.models import AcademicAlert, Department, utcnow
from engineering_portal.routes.helpers import contains_any, department_choices, flag_arg, search_term

bp = Blueprint("alerts", __name__, url_prefix="/alerts")


@bp.route("")
def index():
    query = search_term()
    dep_id = request.args.get("dep_id", type=int)
    upcoming_only = flag_arg("upcoming_only", True)

    stmt = AcademicAlert.query.outerjoin(Department)
    if dep_id is not None:
        stmt = stmt.filter(AcademicAlert.department_id == dep_id)
    if query:
        stmt = stmt.filter(
            contains_any(
                query,
                AcademicAlert.title_ar,
                AcademicAlert.title_en,
                AcademicAlert.location,
                Department.name_ar,
                Department.name_en,
                Department.code,
            )
        )
    if upcoming_only:
        since = utcnow() - timedelta(days=1)
        stmt = stmt.filter(or_(AcademicAlert.date.is_(None), AcademicAlert.date >= since))

    alerts = stmt.order_by(AcademicAlert.is_important.desc(), AcademicAlert.date).all()
    return render_template(
        "alerts/index.html",
        page_title=tr("التنبيهات الأكاديمية", "Academic Alerts"),
        alerts=alerts,
        query=query,
        dep_id=dep_id,
        upcoming_only=upcoming_only,
        departments=department_choices(),
    )


@bp.route("/details/<int:alert_id>")
def details(alert_id: int):
    alert = db.session.get(AcademicAlert, alert_id)
    if alert is None:
        abort(404)
    return render_template(
        "alerts/details.html",
        page_title=tr(alert.title_ar, alert.title_en),
        alert=alert,
    )
