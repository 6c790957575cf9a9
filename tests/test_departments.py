from __future__ import annotations

import io
import os

from conftest import add, count, fetch

from engineering_portal.models import Department, Exam, ExamMode, FacultyMember, utcnow


def department_payload(**overrides):
    payload = {
        "code": "CIV",
        "name_ar": "الهندسة المدنية",
        "name_en": "Civil Engineering",
        "description_ar": "",
        "description_en": "Roads, bridges and structures.",
    }
    payload.update(overrides)
    return payload


def test_create_department(app, admin_client):
    response = admin_client.post("/admin/departments/create", data=department_payload())

    assert response.status_code == 302
    assert count(app, Department, code="CIV") == 1


def test_duplicate_code_is_rejected(app, admin_client, department):
    response = admin_client.post("/admin/departments/create", data=department_payload(code="COMP"))

    assert response.status_code == 200
    assert b"Code is already in use." in response.data
    assert count(app, Department) == 1


def test_edit_keeps_own_code(app, admin_client, department):
    response = admin_client.post(
        f"/admin/departments/edit/{department}",
        data=department_payload(code="COMP", name_en="Computer & Network Engineering"),
    )

    assert response.status_code == 302
    assert fetch(app, Department, department).name_en == "Computer & Network Engineering"


def test_edit_rejects_code_of_another_department(app, admin_client, department):
    other = add(app, Department(code="MECH", name_ar="ميكانيك", name_en="Mechanical Engineering"))

    response = admin_client.post(f"/admin/departments/edit/{other}", data=department_payload(code="COMP"))

    assert response.status_code == 200
    assert b"Code is already in use." in response.data
    assert fetch(app, Department, other).code == "MECH"


def test_departments_without_code_do_not_collide(app, admin_client):
    add(app, Department(name_ar="قسم", name_en="Unnamed"))

    response = admin_client.post("/admin/departments/create", data=department_payload(code=""))

    assert response.status_code == 302
    assert count(app, Department) == 2


def test_missing_required_fields_rerender_form(app, admin_client):
    response = admin_client.post("/admin/departments/create", data=department_payload(name_en=""))

    assert response.status_code == 200
    assert b"English name is required." in response.data
    assert count(app, Department) == 0


def test_delete_rejected_while_faculty_reference_department(app, admin_client, department):
    add(
        app,
        FacultyMember(full_name_ar="د. هبة", full_name_en="Dr. Heba", department_id=department),
    )

    response = admin_client.post(f"/admin/departments/delete/{department}")

    assert response.status_code == 302
    assert count(app, Department) == 1


def test_delete_rejected_while_exams_reference_department(app, admin_client, department):
    add(
        app,
        Exam(
            course_code="CS101",
            course_name_ar="مقدمة",
            course_name_en="Intro",
            year=1,
            date_time=utcnow(),
            mode=ExamMode.ONLINE,
            department_id=department,
        ),
    )

    response = admin_client.post(f"/admin/departments/delete/{department}", follow_redirects=True)

    assert response.status_code == 200
    assert count(app, Department) == 1
    assert count(app, Exam) == 1


def test_delete_unused_department(app, admin_client, department):
    response = admin_client.post(f"/admin/departments/delete/{department}")

    assert response.status_code == 302
    assert count(app, Department) == 0


def test_image_upload_is_stored_under_departments_folder(app, admin_client):
    response = admin_client.post(
        "/admin/departments/create",
        data={**department_payload(), "image": (io.BytesIO(b"\x89PNG fake"), "logo.png")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 302
    with app.app_context():
        saved = Department.query.filter_by(code="CIV").one()
        assert saved.image_path.startswith("img/departments/")
        assert saved.image_path.endswith(".png")
        assert os.path.isfile(os.path.join(app.config["UPLOAD_ROOT"], saved.image_path))


def test_image_with_unsupported_extension_is_rejected(app, admin_client):
    response = admin_client.post(
        "/admin/departments/create",
        data={**department_payload(), "image": (io.BytesIO(b"MZ"), "logo.exe")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    assert b"Unsupported file type." in response.data
    assert count(app, Department) == 0


def test_public_search_is_case_insensitive(app, client):
    add(app, Department(code="CIV", name_ar="الهندسة المدنية", name_en="Civil Engineering"))
    add(app, Department(code="MECH", name_ar="الهندسة الميكانيكية", name_en="Mechanical Engineering"))

    response = client.get("/departments?q=CIVIL&culture=en")

    assert response.status_code == 200
    assert b"Civil Engineering" in response.data
    assert b"Mechanical Engineering" not in response.data


def test_public_details_and_missing_department(app, client, department):
    assert client.get(f"/departments/details/{department}").status_code == 200
    assert client.get("/departments/details/999").status_code == 404


def test_code_check_ignores_letter_case(app, admin_client, department):
    response = admin_client.post("/admin/departments/create", data=department_payload(code="comp"))

    assert response.status_code == 200
    assert b"Code is already in use." in response.data
    assert count(app, Department) == 1


def test_image_with_arabic_file_name_keeps_extension(app, admin_client):
    response = admin_client.post(
        "/admin/departments/create",
        data={**department_payload(), "image": (io.BytesIO(b"\x89PNG fake"), "صورة القسم.png")},
        content_type="multipart/form-data",
    )

    assert response.status_code == 302
    with app.app_context():
        saved = Department.query.filter_by(code="CIV").one()
        assert saved.image_path.startswith("img/departments/")
        assert saved.image_path.endswith(".png")


def test_replacing_image_removes_previous_file(app, admin_client, department):
    root = app.config["UPLOAD_ROOT"]

    def upload(name):
        response = admin_client.post(
            f"/admin/departments/edit/{department}",
            data={**department_payload(code="COMP"), "image": (io.BytesIO(b"\x89PNG fake"), name)},
            content_type="multipart/form-data",
        )
        assert response.status_code == 302
        return fetch(app, Department, department).image_path

    first = upload("first.png")
    second = upload("second.jpg")

    assert second != first
    assert not os.path.exists(os.path.join(root, first))
    assert os.path.isfile(os.path.join(root, second))


def test_edit_without_new_image_keeps_current_file(app, admin_client, department):
    admin_client.post(
        f"/admin/departments/edit/{department}",
        data={**department_payload(code="COMP"), "image": (io.BytesIO(b"\x89PNG fake"), "logo.png")},
        content_type="multipart/form-data",
    )
    stored = fetch(app, Department, department).image_path

    response = admin_client.post(f"/admin/departments/edit/{department}", data=department_payload(code="COMP"))

    assert response.status_code == 302
    assert fetch(app, Department, department).image_path == stored
    assert os.path.isfile(os.path.join(app.config["UPLOAD_ROOT"], stored))


def test_deleting_department_removes_its_image(app, admin_client):
    admin_client.post(
        "/admin/departments/create",
        data={**department_payload(), "image": (io.BytesIO(b"\x89PNG fake"), "logo.png")},
        content_type="multipart/form-data",
    )
    with app.app_context():
        saved = Department.query.filter_by(code="CIV").one()
        department_id, image_path = saved.id, saved.image_path

    response = admin_client.post(f"/admin/departments/delete/{department_id}")

    assert response.status_code == 302
    assert not os.path.exists(os.path.join(app.config["UPLOAD_ROOT"], image_path))


def test_delete_confirmation_text_is_json_encoded(app, admin_client, department):
    response = admin_client.get("/admin/departments?culture=en")

    assert response.status_code == 200
    assert b"onsubmit='return confirm(\"Delete this department?\");'" in response.data
