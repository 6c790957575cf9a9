from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for

from engineering_portal.config import IMAGE_EXTENSIONS
from engineering_portal.extensions import db
from engineering_portal.forms import faculty_form, form_values
from engineering_portal.i18n import tr
from engineering_portal.models import Department, FacultyMember
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, department_choices, get_or_404, paginate, search_term
from engineering_portal.uploads import FACULTY_PHOTOS, delete_upload, save_upload

logger = logging.getLogger(__name__)

FIELDS = ["full_name_ar", "full_name_en", "title_ar", "title_en", "email", "office", "department_id"]


def render_form(member, values, errors):
    return render_template(
        "admin/faculty/form.html",
        page_title=tr("تعديل عضو هيئة تدريس", "Edit Faculty Member") if member else tr(
            "إضافة عضو هيئة تدريس", "New Faculty Member"
        ),
        member=member,
        values=values,
        errors=errors,
        departments=department_choices(),
    )


def save_member(member: FacultyMember | None):
    data, errors = faculty_form(request.form)
    if "department_id" not in errors and (
        data["department_id"] is None or db.session.get(Department, data["department_id"]) is None
    ):
        errors["department_id"] = "Select a department."

    photo_path = None
    if not errors:
        photo_path, error = save_upload(request.files.get("photo"), FACULTY_PHOTOS, IMAGE_EXTENSIONS)
        if error:
            errors["photo"] = error
    if errors:
        return render_form(member, request.form, errors)

    created = member is None
    if created:
        member = FacultyMember()
        db.session.add(member)
    for name, value in data.items():
        setattr(member, name, value)

    old_photo = None
    if photo_path:
        old_photo, member.photo_path = member.photo_path, photo_path

    db.session.commit()
    if old_photo:
        delete_upload(old_photo, FACULTY_PHOTOS)

    logger.info("%s faculty member %s", "Created" if created else "Updated", member.id)
    flash(tr("تم حفظ بيانات عضو هيئة التدريس.", "Faculty member saved."), "success")
    return redirect(url_for("admin.faculty_index"))


@bp.route("/faculty")
def faculty_index():
    query = search_term()
    stmt = FacultyMember.query.join(Department)
    if query:
        stmt = stmt.filter(
            contains_any(
                query,
                FacultyMember.full_name_ar,
                FacultyMember.full_name_en,
                FacultyMember.email,
                Department.code,
                Department.name_en,
            )
        )
    pagination = paginate(stmt.order_by(Department.code, FacultyMember.full_name_en))
    return render_template(
        "admin/faculty/index.html",
        page_title=tr("إدارة أعضاء هيئة التدريس", "Manage Faculty"),
        pagination=pagination,
        query=query,
    )


@bp.route("/faculty/details/<int:member_id>")
def faculty_details(member_id: int):
    member = get_or_404(FacultyMember, member_id)
    return render_template(
        "admin/faculty/details.html",
        page_title=tr(member.full_name_ar, member.full_name_en),
        member=member,
    )


@bp.route("/faculty/create", methods=["GET", "POST"])
def faculty_create():
    if request.method == "GET":
        return render_form(None, {}, {})
    return save_member(None)


@bp.route("/faculty/edit/<int:member_id>", methods=["GET", "POST"])
def faculty_edit(member_id: int):
    member = get_or_404(FacultyMember, member_id)
    if request.method == "GET":
        return render_form(member, form_values(member, FIELDS), {})
    return save_member(member)


@bp.route("/faculty/delete/<int:member_id>", methods=["POST"])
def faculty_delete(member_id: int):
    member = get_or_404(FacultyMember, member_id)
    photo_path = member.photo_path
    db.session.delete(member)
    db.session.commit()
    delete_upload(photo_path, FACULTY_PHOTOS)

    logger.info("Deleted faculty member %s", member_id)
    flash(tr("تم الحذف.", "Faculty member deleted."), "success")
    return redirect(url_for("admin.faculty_index"))
