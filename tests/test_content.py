from __future__ import annotations

import io
import os
from datetime import timedelta

from conftest import add, count, fetch

from engineering_portal.models import AcademicAlert, Department, FacultyMember, NewsCategory, NewsItem, utcnow


def test_faculty_arabic_name_falls_back_to_english(app, admin_client, department):
    response = admin_client.post(
        "/admin/faculty/create",
        data={"full_name_en": "Dr. Heba Zeidan", "full_name_ar": "", "email": "heba@example.test", "department_id": str(department)},
    )

    assert response.status_code == 302
    with app.app_context():
        member = FacultyMember.query.one()
        assert member.full_name_ar == "Dr. Heba Zeidan"


def test_faculty_rejects_invalid_email(app, admin_client, department):
    response = admin_client.post(
        "/admin/faculty/create",
        data={"full_name_en": "Dr. X", "email": "not-an-email", "department_id": str(department)},
    )

    assert response.status_code == 200
    assert b"Email is not a valid email address." in response.data
    assert count(app, FacultyMember) == 0


def test_public_faculty_filters_by_department_and_term(app, client, department):
    civil = add(app, Department(code="CIV", name_ar="مدنية", name_en="Civil Engineering"))
    add(app, FacultyMember(full_name_ar="أحمد", full_name_en="Dr. Ahmad Ali", department_id=department))
    add(app, FacultyMember(full_name_ar="رنيم", full_name_en="Dr. Raneem Asaad", department_id=civil))

    by_department = client.get("/faculty", query_string={"dep": "Civil Engineering", "culture": "en"}).data
    assert b"Dr. Raneem Asaad" in by_department
    assert b"Dr. Ahmad Ali" not in by_department

    by_term = client.get("/faculty?q=AHMAD&culture=en").data
    assert b"Dr. Ahmad Ali" in by_term
    assert b"Dr. Raneem Asaad" not in by_term


def test_alert_title_fallback_and_optional_department(app, admin_client):
    response = admin_client.post(
        "/admin/alerts/create",
        data={"title_en": "Registration opens", "title_ar": "", "date": "", "department_id": ""},
    )

    assert response.status_code == 302
    with app.app_context():
        alert = AcademicAlert.query.one()
        assert alert.title_ar == "Registration opens"
        assert alert.department_id is None
        assert alert.date is None


def test_public_alerts_hide_past_items_by_default(app, client):
    now = utcnow()
    add(app, AcademicAlert(title_ar="قديم", title_en="Old workshop", date=now - timedelta(days=5)))
    add(app, AcademicAlert(title_ar="قريب", title_en="Upcoming seminar", date=now + timedelta(days=2)))
    add(app, AcademicAlert(title_ar="عام", title_en="General notice"))

    default = client.get("/alerts?culture=en").data
    assert b"Upcoming seminar" in default
    assert b"General notice" in default
    assert b"Old workshop" not in default

    everything = client.get("/alerts?upcoming_only=false").data
    assert b"Old workshop" in everything


def test_public_alerts_list_important_first(app, client):
    soon = utcnow() + timedelta(days=1)
    add(app, AcademicAlert(title_ar="ب", title_en="Routine notice", date=soon))
    add(app, AcademicAlert(title_ar="أ", title_en="Exam hall changed", date=soon + timedelta(days=3), is_important=True))

    body = client.get("/alerts?culture=en").data.decode()
    assert body.index("Exam hall changed") < body.index("Routine notice")


def test_public_alerts_search_matches_department_name(app, client, department):
    add(app, AcademicAlert(title_ar="ورشة", title_en="Workshop", department_id=department))
    add(app, AcademicAlert(title_ar="محاضرة", title_en="Lecture"))

    body = client.get("/alerts?q=computer&culture=en").data
    assert b"Workshop" in body
    assert b"Lecture" not in body


def test_deleting_department_clears_alert_link(app, admin_client, department):
    alert_id = add(app, AcademicAlert(title_ar="ورشة", title_en="Workshop", department_id=department))

    admin_client.post(f"/admin/departments/delete/{department}")

    assert fetch(app, AcademicAlert, alert_id).department_id is None


def test_news_fallbacks_and_category(app, admin_client):
    response = admin_client.post(
        "/admin/news/create",
        data={
            "title_en": "Robotics day",
            "body_en": "Join us in the main hall.",
            "category": "WORKSHOP",
            "publish_date": "",
            "is_published": "on",
        },
    )

    assert response.status_code == 302
    with app.app_context():
        item = NewsItem.query.one()
        assert item.title_ar == "Robotics day"
        assert item.body_ar == "Join us in the main hall."
        assert item.category == NewsCategory.WORKSHOP
        assert item.publish_date is not None
        assert item.is_published


def test_public_news_shows_published_items_newest_first(app, client):
    now = utcnow()
    add(app, NewsItem(title_ar="أ", title_en="Older story", publish_date=now - timedelta(days=3)))
    add(app, NewsItem(title_ar="ب", title_en="Fresh story", publish_date=now))
    add(app, NewsItem(title_ar="ج", title_en="Draft story", publish_date=now, is_published=False))

    body = client.get("/news?culture=en").data.decode()
    assert "Draft story" not in body
    assert body.index("Fresh story") < body.index("Older story")

    drafts = client.get("/news?published_only=false&culture=en").data.decode()
    assert "Draft story" in drafts


def test_public_news_filters_by_category(app, client):
    add(app, NewsItem(title_ar="أ", title_en="Keynote", category=NewsCategory.CONFERENCE))
    add(app, NewsItem(title_ar="ب", title_en="Hands-on lab", category=NewsCategory.WORKSHOP))

    body = client.get("/news?category=CONFERENCE&culture=en").data
    assert b"Keynote" in body
    assert b"Hands-on lab" not in body


def upload_form(payload, field, filename):
    return {**payload, field: (io.BytesIO(b"\x89PNG fake"), filename)}


def test_faculty_photo_is_replaced_and_removed_on_delete(app, admin_client, department):
    root = app.config["UPLOAD_ROOT"]
    payload = {"full_name_en": "Dr. Heba Zeidan", "full_name_ar": "د. هبة زيدان", "department_id": str(department)}

    response = admin_client.post(
        "/admin/faculty/create", data=upload_form(payload, "photo", "heba.png"), content_type="multipart/form-data"
    )
    assert response.status_code == 302
    with app.app_context():
        member = FacultyMember.query.one()
        member_id, first = member.id, member.photo_path
    assert first.startswith("img/faculty/")

    response = admin_client.post(
        f"/admin/faculty/edit/{member_id}",
        data=upload_form(payload, "photo", "heba-2024.jpg"),
        content_type="multipart/form-data",
    )
    assert response.status_code == 302
    second = fetch(app, FacultyMember, member_id).photo_path
    assert not os.path.exists(os.path.join(root, first))
    assert os.path.isfile(os.path.join(root, second))

    response = admin_client.post(f"/admin/faculty/delete/{member_id}")

    assert response.status_code == 302
    assert count(app, FacultyMember) == 0
    assert not os.path.exists(os.path.join(root, second))


def test_news_image_is_replaced_and_removed_on_delete(app, admin_client):
    root = app.config["UPLOAD_ROOT"]
    payload = {"title_en": "Open day", "body_en": "Visit the labs.", "category": "ANNOUNCEMENT", "is_published": "on"}

    admin_client.post(
        "/admin/news/create", data=upload_form(payload, "image", "يوم مفتوح.png"), content_type="multipart/form-data"
    )
    with app.app_context():
        item = NewsItem.query.one()
        item_id, first = item.id, item.image_path
    assert first.startswith("img/news/")
    assert first.endswith(".png")

    response = admin_client.post(
        f"/admin/news/edit/{item_id}", data=upload_form(payload, "image", "poster.webp"), content_type="multipart/form-data"
    )
    assert response.status_code == 302
    second = fetch(app, NewsItem, item_id).image_path
    assert not os.path.exists(os.path.join(root, first))
    assert os.path.isfile(os.path.join(root, second))

    response = admin_client.post(f"/admin/news/delete/{item_id}")

    assert response.status_code == 302
    assert count(app, NewsItem) == 0
    assert not os.path.exists(os.path.join(root, second))
