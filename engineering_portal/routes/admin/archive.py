from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for

from engineering_portal.config import PDF_EXTENSIONS
from engineering_portal.extensions import db
from engineering_portal.forms import archive_form, bool_field, form_values
from engineering_portal.i18n import tr
from engineering_portal.models import ExamArchiveItem
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, get_or_404, paginate, search_term
from engineering_portal.uploads import ARCHIVE_DOCS, delete_upload, save_upload

logger = logging.getLogger(__name__)

FIELDS = ["course_code", "course_name_ar", "course_name_en", "term", "pdf_url", "solution_url"]


def render_form(item, values, errors):
    return render_template(
        "admin/archive/form.html",
        page_title=tr("تعديل عنصر أرشيف", "Edit Archive Item") if item else tr("إضافة عنصر أرشيف", "New Archive Item"),
        item=item,
        values=values,
        errors=errors,
    )


def save_item(item: ExamArchiveItem | None):
    data, errors = archive_form(request.form)

    uploads: dict[str, str] = {}
    if not errors:
        for field, column in (("paper", "pdf_url"), ("solution", "solution_url")):
            path, error = save_upload(request.files.get(field), ARCHIVE_DOCS, PDF_EXTENSIONS)
            if error:
                errors[field] = error
            elif path:
                uploads[column] = path
    if errors:
        for path in uploads.values():
            delete_upload(path, ARCHIVE_DOCS)
        return render_form(item, request.form, errors)

    created = item is None
    if created:
        item = ExamArchiveItem()
        db.session.add(item)

    replaced = []
    for name, value in data.items():
        if name in uploads:
            continue
        setattr(item, name, value)
    for column, path in uploads.items():
        replaced.append(getattr(item, column))
        setattr(item, column, path)

    if not created and "solution_url" not in uploads and bool_field(request.form, "clear_solution"):
        replaced.append(item.solution_url)
        item.solution_url = None

    db.session.commit()
    for path in replaced:
        delete_upload(path, ARCHIVE_DOCS)

    logger.info("%s archive item %s", "Created" if created else "Updated", item.id)
    flash(tr("تم حفظ عنصر الأرشيف.", "Archive item saved."), "success")
    return redirect(url_for("admin.archive_index"))


@bp.route("/archive")
def archive_index():
    query = search_term()
    stmt = ExamArchiveItem.query
    if query:
        stmt = stmt.filter(
            contains_any(
                query,
                ExamArchiveItem.course_code,
                ExamArchiveItem.course_name_ar,
                ExamArchiveItem.course_name_en,
                ExamArchiveItem.term,
            )
        )
    pagination = paginate(stmt.order_by(ExamArchiveItem.term.desc(), ExamArchiveItem.course_code))
    return render_template(
        "admin/archive/index.html",
        page_title=tr("إدارة أرشيف الامتحانات", "Manage Exam Archive"),
        pagination=pagination,
        query=query,
    )


@bp.route("/archive/details/<int:item_id>")
def archive_details(item_id: int):
    item = get_or_404(ExamArchiveItem, item_id)
    return render_template(
        "admin/archive/details.html",
        page_title=tr(item.course_name_ar, item.course_name_en),
        item=item,
    )


@bp.route("/archive/create", methods=["GET", "POST"])
def archive_create():
    if request.method == "GET":
        return render_form(None, {}, {})
    return save_item(None)


@bp.route("/archive/edit/<int:item_id>", methods=["GET", "POST"])
def archive_edit(item_id: int):
    item = get_or_404(ExamArchiveItem, item_id)
    if request.method == "GET":
        return render_form(item, form_values(item, FIELDS), {})
    return save_item(item)


@bp.route("/archive/delete/<int:item_id>", methods=["POST"])
def archive_delete(item_id: int):
    item = get_or_404(ExamArchiveItem, item_id)
    paths = [item.pdf_url, item.solution_url]
    db.session.delete(item)
    db.session.commit()
    for path in paths:
        delete_upload(path, ARCHIVE_DOCS)

    logger.info("Deleted archive item %s", item_id)
    flash(tr("تم حذف عنصر الأرشيف.", "Archive item deleted."), "success")
    return redirect(url_for("admin.archive_index"))
