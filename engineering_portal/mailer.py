from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from flask import current_app

logger = logging.getLogger(__name__)


def smtp_configured() -> bool:
    cfg = current_app.config
    return bool(cfg.get("SMTP_HOST") and cfg.get("SMTP_FROM"))


def send_email(to_email: str, subject: str, html_body: str) -> tuple[bool, str]:
    cfg = current_app.config
    if not smtp_configured():
        logger.warning("Email to %s skipped: SMTP is not configured", to_email)
        return False, "SMTP is not configured. Set SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD, SMTP_FROM."

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = formataddr((cfg.get("SMTP_FROM_NAME") or "", cfg["SMTP_FROM"]))
    msg["To"] = to_email
    msg.set_content("This message requires an HTML capable mail client.")
    msg.add_alternative(html_body, subtype="html")

    try:
        with smtplib.SMTP(cfg["SMTP_HOST"], cfg["SMTP_PORT"], timeout=10) as server:
            if cfg.get("SMTP_USE_TLS", True):
                server.starttls()
            if cfg.get("SMTP_USER") and cfg.get("SMTP_PASSWORD"):
                server.login(cfg["SMTP_USER"], cfg["SMTP_PASSWORD"])
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Email send to %s failed", to_email)
        return False, f"Email send failed: {exc}"

    logger.info("Email sent to %s: %s", to_email, subject)
    return True, "Email sent successfully."


def ticket_reply_body(full_name: str, issue_label: str, reply: str) -> str:
    safe_reply = html.escape(reply).replace("\n", "<br/>")
    return (
        f"<p>مرحباً {html.escape(full_name)},</p>"
        f"<p>بخصوص بلاغك: <strong>{html.escape(issue_label)}</strong></p>"
        f"<p>{safe_reply}</p>"
        "<hr/><p>جامعة مؤتة – كلية الهندسة</p>"
    )
