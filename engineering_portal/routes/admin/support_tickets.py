from __future__ import annotations

import logging

from flask import flash, redirect, render_template, request, url_for

from engineering_portal.extensions import db
from engineering_portal.forms import flag_or_default, text_field
from engineering_portal.i18n import tr
from engineering_portal.mailer import send_email, ticket_reply_body
from engineering_portal.models import SupportTicket, utcnow
from engineering_portal.routes.admin import bp
from engineering_portal.routes.helpers import contains_any, get_or_404, page_args, paginate, search_term
from engineering_portal.routes.support import ISSUE_LABELS
from engineering_portal.uploads import SUPPORT_UPLOADS, delete_upload

logger = logging.getLogger(__name__)


def render_details(ticket, values, errors):
    return render_template(
        "admin/support_tickets/details.html",
        page_title=tr("تفاصيل البلاغ", "Ticket Details"),
        ticket=ticket,
        issue_labels=ISSUE_LABELS,
        values=values,
        errors=errors,
    )


@bp.route("/support-tickets")
def support_tickets_index():
    query = search_term()
    stmt = SupportTicket.query
    if query:
        stmt = stmt.filter(
            contains_any(
                query,
                SupportTicket.full_name,
                SupportTicket.email,
                SupportTicket.course_exam,
                SupportTicket.description,
            )
        )
    pagination = paginate(stmt.order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc()))
    return render_template(
        "admin/support_tickets/index.html",
        page_title=tr("بلاغات الدعم الفني", "Support Tickets"),
        pagination=pagination,
        query=query,
        issue_labels=ISSUE_LABELS,
    )


@bp.route("/support-tickets/details/<int:ticket_id>")
def support_tickets_details(ticket_id: int):
    ticket = get_or_404(SupportTicket, ticket_id)
    return render_details(ticket, {"reply": ticket.admin_reply or "", "mark_resolved": "on"}, {})


@bp.route("/support-tickets/reply/<int:ticket_id>", methods=["POST"])
def support_tickets_reply(ticket_id: int):
    ticket = get_or_404(SupportTicket, ticket_id)

    errors: dict[str, str] = {}
    reply = text_field(request.form, errors, "reply", "Reply", 4000, required=True)
    if errors:
        return render_details(ticket, request.form, errors)

    ticket.admin_reply = reply
    ticket.replied_at = utcnow()
    if flag_or_default(request.form, "mark_resolved", True):
        ticket.is_resolved = True
    db.session.commit()
    logger.info("Replied to support ticket %s (resolved=%s)", ticket.id, ticket.is_resolved)

    issue_ar, _issue_en = ISSUE_LABELS[ticket.issue_type]
    ok, detail = send_email(
        ticket.email,
        "رد على بلاغ الدعم الفني",
        ticket_reply_body(ticket.full_name, issue_ar, reply),
    )
    if ok:
        flash(tr("تم إرسال الرد بنجاح.", "Reply sent."), "success")
    else:
        logger.warning("Reply to ticket %s saved but email failed: %s", ticket.id, detail)
        flash(
            tr(
                f"تم حفظ الرد لكن تعذر إرسال البريد: {detail}",
                f"Reply saved, but the email could not be sent: {detail}",
            ),
            "warning",
        )
    return redirect(url_for("admin.support_tickets_details", ticket_id=ticket.id))


@bp.route("/support-tickets/delete/<int:ticket_id>", methods=["POST"])
def support_tickets_delete(ticket_id: int):
    ticket = get_or_404(SupportTicket, ticket_id)
    screenshot_path = ticket.screenshot_path
    db.session.delete(ticket)
    db.session.commit()
    delete_upload(screenshot_path, SUPPORT_UPLOADS)

    logger.info("Deleted support ticket %s", ticket_id)
    flash(tr("تم حذف البلاغ.", "Ticket deleted."), "success")
    page, page_size = page_args()
    return redirect(
        url_for(
            "admin.support_tickets_index",
            page=page,
            page_size=page_size,
            q=request.args.get("q") or None,
        )
    )
