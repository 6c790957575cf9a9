from __future__ import annotations

import re
from datetime import datetime

from conftest import add, count, fetch

from engineering_portal.models import Department, Exam, ExamMode


def exam_payload(department_id, **overrides):
    payload = {
        "business_id": "",
        "course_code": "EE201",
        "course_name_en": "Circuits I",
        "course_name_ar": "",
        "year": "2",
        "date_time": "2030-01-15T09:30",
        "mode": "ONLINE",
        "location": "Hall A",
        "department_id": str(department_id),
    }
    payload.update(overrides)
    return payload


def make_exam(app, department_id, **fields):
    values = {
        "business_id": "EXAM-1",
        "course_code": "EE201",
        "course_name_ar": "دوائر كهربائية",
        "course_name_en": "Circuits I",
        "year": 2,
        "date_time": datetime(2030, 1, 15, 9, 30),
        "mode": ExamMode.IN_PERSON,
        "department_id": department_id,
    }
    values.update(fields)
    return add(app, Exam(**values))


def test_create_generates_business_id_and_fills_arabic_name(app, admin_client, department):
    response = admin_client.post("/admin/exams/create", data=exam_payload(department))

    assert response.status_code == 302
    with app.app_context():
        exam = Exam.query.one()
        assert re.fullmatch(r"[0-9a-f]{32}", exam.business_id)
        assert exam.course_name_ar == "Circuits I"
        assert exam.mode == ExamMode.ONLINE
        assert exam.date_time == datetime(2030, 1, 15, 9, 30)


def test_edit_with_blank_business_id_keeps_existing(app, admin_client, department):
    exam_id = make_exam(app, department)

    response = admin_client.post(
        f"/admin/exams/edit/{exam_id}",
        data=exam_payload(department, business_id="   ", course_name_en="Circuits II"),
    )

    assert response.status_code == 302
    exam = fetch(app, Exam, exam_id)
    assert exam.business_id == "EXAM-1"
    assert exam.course_name_en == "Circuits II"


def test_edit_with_business_id_replaces_it(app, admin_client, department):
    exam_id = make_exam(app, department)

    admin_client.post(f"/admin/exams/edit/{exam_id}", data=exam_payload(department, business_id="  EXAM-2 "))

    assert fetch(app, Exam, exam_id).business_id == "EXAM-2"


def test_unknown_department_is_rejected(app, admin_client, department):
    response = admin_client.post("/admin/exams/create", data=exam_payload(999))

    assert response.status_code == 200
    assert b"Select a department." in response.data
    assert count(app, Exam) == 0


def test_date_time_with_seconds_is_accepted(app, admin_client, department):
    admin_client.post("/admin/exams/create", data=exam_payload(department, date_time="2030-01-15T09:30:45"))

    with app.app_context():
        assert Exam.query.one().date_time == datetime(2030, 1, 15, 9, 30, 45)


def test_invalid_date_is_reported(app, admin_client, department):
    response = admin_client.post("/admin/exams/create", data=exam_payload(department, date_time="tomorrow"))

    assert response.status_code == 200
    assert b"Date and time is not a valid date." in response.data


def test_public_list_filters_by_department_year_and_term(app, client, department):
    other = add(app, Department(code="CIV", name_ar="مدنية", name_en="Civil Engineering"))
    make_exam(app, department, business_id="A", course_code="CS101", course_name_en="Programming", year=1)
    make_exam(app, department, business_id="B", course_code="CS301", course_name_en="Compilers", year=3)
    make_exam(app, other, business_id="C", course_code="CE210", course_name_en="Statics", year=1)

    by_department = client.get("/exams?dept=COMP&culture=en").data
    assert b"CS101" in by_department and b"CS301" in by_department
    assert b"CE210" not in by_department

    by_year = client.get("/exams?year=1").data
    assert b"CS101" in by_year and b"CE210" in by_year
    assert b"CS301" not in by_year

    by_term = client.get("/exams?q=compil&culture=en").data
    assert b"CS301" in by_term
    assert b"CS101" not in by_term


def test_public_pages(app, client, department):
    exam_id = make_exam(app, department)

    assert client.get(f"/exams/details/{exam_id}").status_code == 200
    assert client.get("/exams/details/404").status_code == 404
    assert client.get("/exams/policies").status_code == 200
    assert client.get("/exams/archive").status_code == 200
    assert client.get("/exams/support").headers["Location"].endswith("/support")


def test_delete_exam(app, admin_client, department):
    exam_id = make_exam(app, department)

    admin_client.post(f"/admin/exams/delete/{exam_id}")

    assert count(app, Exam) == 0
