from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for

from engineering_portal.extensions import db
from engineering_portal.forms import alert_form, form_values
from engineering_portal.i18n import tr
from engineering_portal.models import AcademicAlert, Department
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, department_choices, get_or_404, paginate, search_term

logger = logging.getLogger(__name__)

FIELDS = ["title_ar", "title_en", "location", "date", "is_important", "department_id"]


def render_form(alert, values, errors):
    return render_template(
        "admin/alerts/form.html",
        page_title=tr("تعديل تنبيه", "Edit Alert") if alert else tr("إضافة تنبيه", "New Alert"),
        alert=alert,
        values=values,
        errors=errors,
        departments=department_choices(),
    )


def save_alert(alert: AcademicAlert | None):
    data, errors = alert_form(request.form)
    if data["department_id"] is not None and db.session.get(Department, data["department_id"]) is None:
        errors["department_id"] = "Select a department."
    if errors:
        return render_form(alert, request.form, errors)

    created = alert is None
    if created:
        alert = AcademicAlert()
        db.session.add(alert)
    for name, value in data.items():
        setattr(alert, name, value)

    db.session.commit()
    logger.info("%s alert %s", "Created" if created else "Updated", alert.id)
    flash(tr("تم حفظ التنبيه.", "Alert saved."), "success")
    return redirect(url_for("admin.alerts_index"))


@bp.route("/alerts")
def alerts_index():
    query = search_term()
    stmt = AcademicAlert.query
    if query:
        stmt = stmt.filter(contains_any(query, AcademicAlert.title_ar, AcademicAlert.title_en, AcademicAlert.location))
    pagination = paginate(stmt.order_by(AcademicAlert.is_important.desc(), AcademicAlert.date.desc()))
    return render_template(
        "admin/alerts/index.html",
        page_title=tr("إدارة التنبيهات", "Manage Alerts"),
        pagination=pagination,
        query=query,
    )


@bp.route("/alerts/details/<int:alert_id>")
def alerts_details(alert_id: int):
    alert = get_or_404(AcademicAlert, alert_id)
    return render_template(
        "admin/alerts/details.html",
        page_title=tr(alert.title_ar, alert.title_en),
        alert=alert,
    )


@bp.route("/alerts/create", methods=["GET", "POST"])
def alerts_create():
    if request.method == "GET":
        return render_form(None, {}, {})
    return save_alert(None)


@bp.route("/alerts/edit/<int:alert_id>", methods=["GET", "POST"])
def alerts_edit(alert_id: int):
    alert = get_or_404(AcademicAlert, alert_id)
    if request.method == "GET":
        return render_form(alert, form_values(alert, FIELDS), {})
    return save_alert(alert)


@bp.route("/alerts/delete/<int:alert_id>", methods=["POST"])
def alerts_delete(alert_id: int):
    alert = get_or_404(AcademicAlert, alert_id)
    db.session.delete(alert)
    db.session.commit()
    logger.info("Deleted alert %s", alert_id)
    flash(tr("تم حذف التنبيه.", "Alert deleted."), "success")
    return redirect(url_for("admin.alerts_index"))
