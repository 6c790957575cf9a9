from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for

from engineering_portal.extensions import db
from engineering_portal.forms import exam_form, form_values
from engineering_portal.i18n import tr
from engineering_portal.models import Department, Exam, ExamMode, new_business_id
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, department_choices, get_or_404, paginate, search_term

logger = logging.getLogger(__name__)

FIELDS = [
    "business_id",
    "course_code",
    "course_name_ar",
    "course_name_en",
    "year",
    "date_time",
    "mode",
    "location",
    "lms_url",
    "lms_how_to",
    "instructions",
    "has_stego_protection",
    "department_id",
]


def render_form(exam, values, errors):
    return render_template(
        "admin/exams/form.html",
        page_title=tr("تعديل امتحان", "Edit Exam") if exam else tr("إضافة امتحان", "New Exam"),
        exam=exam,
        values=values,
        errors=errors,
        departments=department_choices(),
        modes=[(mode.name, mode.value) for mode in ExamMode],
    )


def save_exam(exam: Exam | None):
    data, errors = exam_form(request.form)
    if "department_id" not in errors and (
        data["department_id"] is None or db.session.get(Department, data["department_id"]) is None
    ):
        errors["department_id"] = "Select a department."
    if errors:
        return render_form(exam, request.form, errors)

    created = exam is None
    business_id = data.pop("business_id")
    if created:
        exam = Exam(business_id=business_id or new_business_id())
        db.session.add(exam)
    elif business_id:
        exam.business_id = business_id
    for name, value in data.items():
        setattr(exam, name, value)

    db.session.commit()
    logger.info("%s exam %s (%s)", "Created" if created else "Updated", exam.id, exam.business_id)
    flash(tr("تم حفظ الامتحان.", "Exam saved."), "success")
    return redirect(url_for("admin.exams_index"))


@bp.route("/exams")
def exams_index():
    query = search_term()
    stmt = Exam.query
    if query:
        stmt = stmt.filter(
            contains_any(query, Exam.course_code, Exam.course_name_ar, Exam.course_name_en, Exam.location)
        )
    pagination = paginate(stmt.order_by(Exam.date_time.desc()))
    return render_template(
        "admin/exams/index.html",
        page_title=tr("إدارة الامتحانات", "Manage Exams"),
        pagination=pagination,
        query=query,
    )


@bp.route("/exams/details/<int:exam_id>")
def exams_details(exam_id: int):
    exam = get_or_404(Exam, exam_id)
    return render_template(
        "admin/exams/details.html",
        page_title=tr(exam.course_name_ar, exam.course_name_en),
        exam=exam,
    )


@bp.route("/exams/create", methods=["GET", "POST"])
def exams_create():
    if request.method == "GET":
        return render_form(None, {}, {})
    return save_exam(None)


@bp.route("/exams/edit/<int:exam_id>", methods=["GET", "POST"])
def exams_edit(exam_id: int):
    exam = get_or_404(Exam, exam_id)
    if request.method == "GET":
        return render_form(exam, form_values(exam, FIELDS), {})
    return save_exam(exam)


@bp.route("/exams/delete/<int:exam_id>", methods=["POST"])
def exams_delete(exam_id: int):
    exam = get_or_404(Exam, exam_id)
    db.session.delete(exam)
    db.session.commit()
    logger.info("Deleted exam %s", exam_id)
    flash(tr("تم حذف الامتحان.", "Exam deleted."), "success")
    return redirect(url_for("admin.exams_index"))
