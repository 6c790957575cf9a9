from __future__ import annotations

from flask import render_template, url_for

from engineering_portal.i18n import tr
from engineering_portal.models import AcademicAlert, Department, Exam, FacultyMember, NewsItem, SupportTicket
from engineering_portal.routes.admin import bp


def recent_activities(limit: int = 5) -> list[dict]:
    activities = []
    for item in NewsItem.query.order_by(NewsItem.publish_date.desc()).limit(3):
        activities.append(
            {
                "kind": "news",
                "title": tr(item.title_ar, item.title_en),
                "when": item.publish_date,
                "url": url_for("admin.news_details", item_id=item.id),
            }
        )
    for exam in Exam.query.order_by(Exam.date_time.desc()).limit(3):
        activities.append(
            {
                "kind": "exam",
                "title": f"{exam.course_code} {tr(exam.course_name_ar, exam.course_name_en)}",
                "when": exam.date_time,
                "url": url_for("admin.exams_details", exam_id=exam.id),
            }
        )
    activities.sort(key=lambda row: row["when"], reverse=True)
    return activities[:limit]


@bp.route("")
@bp.route("/dashboard")
def dashboard():
    counts = {
        "departments": Department.query.count(),
        "faculty": FacultyMember.query.count(),
        "exams": Exam.query.count(),
        "alerts": AcademicAlert.query.count(),
        "news": NewsItem.query.count(),
        "open_tickets": SupportTicket.query.filter_by(is_resolved=False).count(),
    }
    return render_template(
        "admin/dashboard.html",
        page_title=tr("لوحة التحكم", "Dashboard"),
        counts=counts,
        activities=recent_activities(),
    )
