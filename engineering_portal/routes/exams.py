from __future__ import annotations

from flask import Blueprint, abort, redirect, render_template, request, url_for
from sqlalchemy import or_

from engineering_portal.extensions import db
from engineering_portal.i18n import is_rtl, tr
from engineering_portal.models import Department, Exam, ExamArchiveItem
from engineering_portal.routes.helpers import contains_any, department_filter_options, search_term

bp = Blueprint("exams", __name__, url_prefix="/exams")


@bp.route("")
def index():
    query = search_term()
    dept = request.args.get("dept", "").strip()
    year = request.args.get("year", type=int)

    stmt = Exam.query.join(Department)
    if dept:
        stmt = stmt.filter(or_(Department.code == dept, Department.name_ar == dept, Department.name_en == dept))
    if year is not None:
        stmt = stmt.filter(Exam.year == year)
    if query:
        name_column = Exam.course_name_ar if is_rtl() else Exam.course_name_en
        stmt = stmt.filter(contains_any(query, Exam.course_code, name_column))

    exams = stmt.order_by(Exam.date_time).all()
    years = [row[0] for row in db.session.query(Exam.year).distinct().order_by(Exam.year)]
    return render_template(
        "exams/index.html",
        page_title=tr("الامتحانات", "Exams"),
        exams=exams,
        query=query,
        dept=dept,
        year=year,
        years=years,
        department_options=department_filter_options(),
    )


@bp.route("/details/<int:exam_id>")
def details(exam_id: int):
    exam = db.session.get(Exam, exam_id)
    if exam is None:
        abort(404)
    return render_template(
        "exams/details.html",
        page_title=tr(exam.course_name_ar, exam.course_name_en),
        exam=exam,
    )


@bp.route("/policies")
def policies():
    return render_template("exams/policies.html", page_title=tr("تعليمات الامتحانات", "Exam Policies"))


@bp.route("/archive")
def archive():
    items = ExamArchiveItem.query.order_by(ExamArchiveItem.term.desc(), ExamArchiveItem.course_code).all()
    return render_template(
        "exams/archive.html",
        page_title=tr("أرشيف الامتحانات", "Exam Archive"),
        items=items,
    )


@bp.route("/support")
def support():
    return redirect(url_for("support.index"))
