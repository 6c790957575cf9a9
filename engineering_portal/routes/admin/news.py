from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for

from engineering_portal.config import IMAGE_EXTENSIONS
from engineering_portal.extensions import db
from engineering_portal.forms import form_values, news_form
from engineering_portal.i18n import tr
from engineering_portal.models import NewsCategory, NewsItem, utcnow
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, get_or_404, paginate, search_term
from engineering_portal.uploads import NEWS_IMAGES, delete_upload, save_upload

logger = logging.getLogger(__name__)

FIELDS = ["title_ar", "title_en", "body_ar", "body_en", "category", "publish_date", "is_published"]


def render_form(item, values, errors):
    return render_template(
        "admin/news/form.html",
        page_title=tr("تعديل خبر", "Edit News Item") if item else tr("إضافة خبر", "New News Item"),
        item=item,
        values=values,
        errors=errors,
        categories=[(category.name, category.value) for category in NewsCategory],
    )


def save_item(item: NewsItem | None):
    data, errors = news_form(request.form)

    image_path = None
    if not errors:
        image_path, error = save_upload(request.files.get("image"), NEWS_IMAGES, IMAGE_EXTENSIONS)
        if error:
            errors["image"] = error
    if errors:
        return render_form(item, request.form, errors)

    created = item is None
    if created:
        item = NewsItem()
        db.session.add(item)
    if data["publish_date"] is None:
        data["publish_date"] = item.publish_date or utcnow()
    for name, value in data.items():
        setattr(item, name, value)

    old_image = None
    if image_path:
        old_image, item.image_path = item.image_path, image_path

    db.session.commit()
    if old_image:
        delete_upload(old_image, NEWS_IMAGES)

    logger.info("%s news item %s", "Created" if created else "Updated", item.id)
    flash(tr("تم حفظ الخبر.", "News item saved."), "success")
    return redirect(url_for("admin.news_index"))


@bp.route("/news")
def news_index():
    query = search_term()
    stmt = NewsItem.query
    if query:
        stmt = stmt.filter(
            contains_any(query, NewsItem.title_ar, NewsItem.title_en, NewsItem.body_ar, NewsItem.body_en)
        )
    pagination = paginate(stmt.order_by(NewsItem.publish_date.desc(), NewsItem.id.desc()))
    return render_template(
        "admin/news/index.html",
        page_title=tr("إدارة الأخبار", "Manage News"),
        pagination=pagination,
        query=query,
    )


@bp.route("/news/details/<int:item_id>")
def news_details(item_id: int):
    item = get_or_404(NewsItem, item_id)
    return render_template(
        "admin/news/details.html",
        page_title=tr(item.title_ar, item.title_en),
        item=item,
    )


@bp.route("/news/create", methods=["GET", "POST"])
def news_create():
    if request.method == "GET":
        return render_form(None, {"is_published": "on"}, {})
    return save_item(None)


@bp.route("/news/edit/<int:item_id>", methods=["GET", "POST"])
def news_edit(item_id: int):
    item = get_or_404(NewsItem, item_id)
    if request.method == "GET":
        return render_form(item, form_values(item, FIELDS), {})
    return save_item(item)


@bp.route("/news/delete/<int:item_id>", methods=["POST"])
def news_delete(item_id: int):
    item = get_or_404(NewsItem, item_id)
    image_path = item.image_path
    db.session.delete(item)
    db.session.commit()
    delete_upload(image_path, NEWS_IMAGES)

    logger.info("Deleted news item %s", item_id)
    flash(tr("تم حذف الخبر.", "News item deleted."), "success")
    return redirect(url_for("admin.news_index"))
