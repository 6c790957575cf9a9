from __future__ import annotations

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from engineering_portal.config import MAX_SCREENSHOT_BYTES, SCREENSHOT_EXTENSIONS
from engineering_portal.extensions import db
from engineering_portal.forms import support_ticket_form
from engineering_portal.i18n import tr
from engineering_portal.models import SupportIssueType, SupportTicket
from engineering_portal.uploads import SUPPORT_UPLOADS, delete_upload, has_file, save_upload

logger = logging.getLogger(__name__)

bp = Blueprint("support", __name__, url_prefix="/support")

ISSUE_LABELS = {
    SupportIssueType.CANNOT_ACCESS_EXAM: ("لا أستطيع الدخول إلى الامتحان", "Cannot access the exam"),
    SupportIssueType.ACCOUNT_PROBLEM: ("مشكلة في الحساب", "Account problem"),
    SupportIssueType.CONTENT_ERROR: ("خطأ في المحتوى", "Content error"),
    SupportIssueType.OTHER: ("أخرى", "Other"),
}


def render_form(values, errors):
    return render_template(
        "support/index.html",
        page_title=tr("الدعم الفني للامتحانات", "Exam Support"),
        values=values,
        errors=errors,
        issue_labels=ISSUE_LABELS,
    )


@bp.route("")
def index():
    return render_form({}, {})


@bp.route("/create", methods=["POST"])
def create():
    data, errors = support_ticket_form(request.form)

    screenshot = request.files.get("screenshot")
    screenshot_path = None
    if not errors and has_file(screenshot):
        screenshot_path, error = save_upload(
            screenshot, SUPPORT_UPLOADS, SCREENSHOT_EXTENSIONS, MAX_SCREENSHOT_BYTES
        )
        if error:
            errors["screenshot"] = error

    if errors:
        return render_form(request.form, errors)

    ticket = SupportTicket(screenshot_path=screenshot_path, **data)
    try:
        db.session.add(ticket)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Could not save support ticket from %s", data["email"])
        if screenshot_path:
            delete_upload(screenshot_path, SUPPORT_UPLOADS)
        errors["__all__"] = tr(
            "حدث خطأ أثناء إرسال الطلب. يرجى المحاولة لاحقاً.",
            "Something went wrong while sending your request. Please try again later.",
        )
        return render_form(request.form, errors)

    logger.info("Support ticket %s created by %s", ticket.id, ticket.email)
    flash(
        tr("تم إرسال طلبك بنجاح. سنتواصل معك عبر البريد الإلكتروني.", "Your request was sent. We will reply by email."),
        "success",
    )
    return redirect(url_for("support.index"))
