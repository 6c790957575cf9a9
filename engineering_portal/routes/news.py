from __future__ import annotations

from flask import Blueprint, abort, render_template, request

from engineering_portal.extensions import db
from engineering_portal.forms import enum_field
from engineering_portal.i18n import tr
from engineering_portal.models import NewsCategory, NewsItem
from engineering_portal.routes.helpers import contains_any, flag_arg, search_term

bp = Blueprint("news", __name__, url_prefix="/news")


@bp.route("")
def index():
    query = search_term()
    category = enum_field(request.args, "category", NewsCategory, None)
    published_only = flag_arg("published_only", True)

    stmt = NewsItem.query
    if published_only:
        stmt = stmt.filter(NewsItem.is_published.is_(True))
    if category is not None:
        stmt = stmt.filter(NewsItem.category == category)
    if query:
        stmt = stmt.filter(
            contains_any(query, NewsItem.title_ar, NewsItem.title_en, NewsItem.body_ar, NewsItem.body_en)
        )

    items = stmt.order_by(NewsItem.publish_date.desc(), NewsItem.id.desc()).all()
    return render_template(
        "news/index.html",
        page_title=tr("الأخبار والفعاليات", "News & Events"),
        items=items,
        query=query,
        category=category,
        categories=list(NewsCategory),
        published_only=published_only,
    )


@bp.route("/details/<int:item_id>")
def details(item_id: int):
    item = db.session.get(NewsItem, item_id)
    if item is None:
        abort(404)
    return render_template(
        "news/details.html",
        page_title=tr(item.title_ar, item.title_en),
        item=item,
    )
