from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for
from sqlalchemy import func

from engineering_portal.config import IMAGE_EXTENSIONS
from engineering_portal.extensions import db
from engineering_portal.forms import department_form, form_values
from engineering_portal.i18n import tr
from engineering_portal.models import Department, Exam, FacultyMember
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, get_or_404, paginate, search_term
from engineering_portal.uploads import DEPARTMENT_IMAGES, delete_upload, save_upload

logger = logging.getLogger(__name__)

FIELDS = ["code", "name_ar", "name_en", "description_ar", "description_en"]


def code_in_use(code: str | None, exclude_id: int | None = None) -> bool:
    if not code:
        return False
    stmt = Department.query.filter(func.lower(Department.code) == code.lower())
    if exclude_id is not None:
        stmt = stmt.filter(Department.id != exclude_id)
    return db.session.query(stmt.exists()).scalar()


def render_form(department, values, errors):
    return render_template(
        "admin/departments/form.html",
        page_title=tr("تعديل قسم", "Edit Department") if department else tr("إضافة قسم", "New Department"),
        department=department,
        values=values,
        errors=errors,
    )


def save_department(department: Department | None):
    data, errors = department_form(request.form)
    if code_in_use(data["code"], department.id if department else None):
        errors["code"] = "Code is already in use."

    image_path = None
    if not errors:
        image_path, error = save_upload(request.files.get("image"), DEPARTMENT_IMAGES, IMAGE_EXTENSIONS)
        if error:
            errors["image"] = error
    if errors:
        return render_form(department, request.form, errors)

    created = department is None
    if created:
        department = Department()
        db.session.add(department)
    for name, value in data.items():
        setattr(department, name, value)

    old_image = None
    if image_path:
        old_image, department.image_path = department.image_path, image_path

    db.session.commit()
    if old_image:
        delete_upload(old_image, DEPARTMENT_IMAGES)

    logger.info("%s department %s", "Created" if created else "Updated", department.id)
    flash(tr("تم حفظ القسم.", "Department saved."), "success")
    return redirect(url_for("admin.departments_index"))


@bp.route("/departments")
def departments_index():
    query = search_term()
    stmt = Department.query
    if query:
        stmt = stmt.filter(contains_any(query, Department.code, Department.name_ar, Department.name_en))
    pagination = paginate(stmt.order_by(Department.name_en))
    return render_template(
        "admin/departments/index.html",
        page_title=tr("إدارة الأقسام", "Manage Departments"),
        pagination=pagination,
        query=query,
    )


@bp.route("/departments/details/<int:department_id>")
def departments_details(department_id: int):
    department = get_or_404(Department, department_id)
    return render_template(
        "admin/departments/details.html",
        page_title=tr(department.name_ar, department.name_en),
        department=department,
    )


@bp.route("/departments/create", methods=["GET", "POST"])
def departments_create():
    if request.method == "GET":
        return render_form(None, {}, {})
    return save_department(None)


@bp.route("/departments/edit/<int:department_id>", methods=["GET", "POST"])
def departments_edit(department_id: int):
    department = get_or_404(Department, department_id)
    if request.method == "GET":
        return render_form(department, form_values(department, FIELDS), {})
    return save_department(department)


@bp.route("/departments/delete/<int:department_id>", methods=["POST"])
def departments_delete(department_id: int):
    department = get_or_404(Department, department_id)

    in_use = (
        FacultyMember.query.filter_by(department_id=department.id).count()
        + Exam.query.filter_by(department_id=department.id).count()
    )
    if in_use:
        logger.warning("Refused to delete department %s: %d dependent rows", department.id, in_use)
        flash(
            tr(
                "لا يمكن حذف القسم لوجود أعضاء هيئة تدريس أو امتحانات مرتبطة به.",
                "Cannot delete this department while faculty members or exams reference it.",
            ),
            "danger",
        )
        return redirect(url_for("admin.departments_index"))

    image_path = department.image_path
    db.session.delete(department)
    db.session.commit()
    delete_upload(image_path, DEPARTMENT_IMAGES)

    logger.info("Deleted department %s", department_id)
    flash(tr("تم حذف القسم.", "Department deleted."), "success")
    return redirect(url_for("admin.departments_index"))
