from __future__ import annotations

from flask import Blueprint, abort, current_app, redirect, render_template, request, send_from_directory, url_for

from engineering_portal.auth import current_user
from engineering_portal.i18n import tr
from engineering_portal.models import AcademicAlert
from engineering_portal.study_plans import DEPARTMENTS, find_plan, plans_by_year_desc

bp = Blueprint("home", __name__)

ADMISSION_PAGES = {
    "index": ("القبول والتسجيل", "Admissions"),
    "requirements": ("شروط القبول", "Admission Requirements"),
    "how-to-apply": ("طريقة التقديم", "How to Apply"),
    "tuition": ("الرسوم الدراسية", "Tuition & Fees"),
}


@bp.route("/")
def welcome():
    if current_user():
        return redirect(url_for("home.index"))
    return render_template("home/welcome.html", page_title=tr("مرحباً بكم", "Welcome"))


@bp.route("/home")
def index():
    alerts = AcademicAlert.query.order_by(AcademicAlert.id.desc()).limit(6).all()
    return render_template("home/index.html", page_title=tr("الرئيسية", "Home"), alerts=alerts)


@bp.route("/home/privacy")
def privacy():
    return render_template("home/privacy.html", page_title=tr("سياسة الخصوصية", "Privacy Policy"))


@bp.route("/admissions", defaults={"page": "index"})
@bp.route("/admissions/<page>")
def admissions(page: str):
    titles = ADMISSION_PAGES.get(page)
    if titles is None:
        abort(404)
    return render_template(
        "home/admissions.html",
        page_title=tr(*titles),
        section=page,
        sections=ADMISSION_PAGES,
    )


@bp.route("/study-plans")
def study_plans():
    return render_template(
        "home/study_plans.html",
        page_title=tr("الخطط الدراسية", "Study Plans"),
        departments=DEPARTMENTS,
        plans=plans_by_year_desc(),
    )


@bp.route("/study-plans/view-pdf")
def view_plan_pdf():
    dep = request.args.get("dep", "").strip()
    year = request.args.get("year", type=int)
    plan = find_plan(dep, year) if year is not None else None
    if plan is None:
        abort(404)
    return render_template(
        "home/view_pdf.html",
        page_title=tr(plan["title_ar"], plan["title_en"]),
        plan=plan,
        department=DEPARTMENTS[dep],
    )


@bp.route("/media/<path:filename>")
def media(filename: str):
    return send_from_directory(current_app.config["UPLOAD_ROOT"], filename)
