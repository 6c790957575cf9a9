from __future__ import annotations

import enum
import re
from datetime import date, datetime
from typing import Any, Mapping

from engineering_portal.models import ExamMode, NewsCategory, SupportIssueType

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DATETIME_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d")

Errors = dict[str, str]


def text_field(
    form: Mapping[str, str],
    errors: Errors,
    name: str,
    label: str,
    max_length: int | None = None,
    required: bool = False,
    fallback: str | None = None,
) -> str | None:
    value = (form.get(name) or "").strip()
    if not value and fallback:
        value = fallback.strip()

    if not value:
        if required:
            errors[name] = f"{label} is required."
        return None

    if max_length is not None and len(value) > max_length:
        errors[name] = f"{label} must be at most {max_length} characters."
    return value


def email_field(
    form: Mapping[str, str],
    errors: Errors,
    name: str,
    label: str,
    max_length: int = 320,
    required: bool = False,
) -> str | None:
    value = text_field(form, errors, name, label, max_length, required)
    if value and name not in errors and not EMAIL_RE.match(value):
        errors[name] = f"{label} is not a valid email address."
    return value


def int_field(
    form: Mapping[str, str],
    errors: Errors,
    name: str,
    label: str,
    required: bool = False,
) -> int | None:
    raw = (form.get(name) or "").strip()
    if not raw:
        if required:
            errors[name] = f"{label} is required."
        return None
    try:
        return int(raw)
    except ValueError:
        errors[name] = f"{label} must be a whole number."
        return None


def bool_field(form: Mapping[str, str], name: str) -> bool:
    return (form.get(name) or "").strip().lower() in {"on", "true", "1", "yes"}


def flag_or_default(form: Mapping[str, str], name: str, default: bool) -> bool:
    if name not in form:
        return default
    # A checkbox paired with a hidden "false" field submits both values.
    values = form.getlist(name) if hasattr(form, "getlist") else [form[name]]
    return any(str(value).strip().lower() in {"on", "true", "1", "yes"} for value in values)


def parse_datetime(raw: str | None) -> datetime | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def datetime_field(
    form: Mapping[str, str],
    errors: Errors,
    name: str,
    label: str,
    required: bool = False,
) -> datetime | None:
    raw = (form.get(name) or "").strip()
    if not raw:
        if required:
            errors[name] = f"{label} is required."
        return None
    parsed = parse_datetime(raw)
    if parsed is None:
        errors[name] = f"{label} is not a valid date."
    return parsed


def enum_field(form: Mapping[str, str], name: str, enum_cls: type[enum.Enum], default: enum.Enum) -> Any:
    raw = (form.get(name) or "").strip()
    if not raw:
        return default
    if raw in enum_cls.__members__:
        return enum_cls[raw]
    for member in enum_cls:
        if str(member.value) == raw:
            return member
    return default


def department_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "code": text_field(form, errors, "code", "Code", 10),
        "name_ar": text_field(form, errors, "name_ar", "Arabic name", 200, required=True),
        "name_en": text_field(form, errors, "name_en", "English name", 200, required=True),
        "description_ar": text_field(form, errors, "description_ar", "Arabic description", 1000),
        "description_en": text_field(form, errors, "description_en", "English description", 1000),
    }
    return data, errors


def faculty_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "full_name_en": text_field(form, errors, "full_name_en", "English name", 200, required=True),
        "full_name_ar": text_field(
            form, errors, "full_name_ar", "Arabic name", 200, required=True, fallback=form.get("full_name_en")
        ),
        "title_ar": text_field(form, errors, "title_ar", "Arabic title", 120),
        "title_en": text_field(form, errors, "title_en", "English title", 120),
        "email": email_field(form, errors, "email", "Email"),
        "office": text_field(form, errors, "office", "Office", 100),
        "department_id": int_field(form, errors, "department_id", "Department"),
    }
    return data, errors


def exam_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "business_id": text_field(form, errors, "business_id", "Business id", 50),
        "course_code": text_field(form, errors, "course_code", "Course code", 20, required=True),
        "course_name_en": text_field(form, errors, "course_name_en", "English course name", 200, required=True),
        "course_name_ar": text_field(
            form, errors, "course_name_ar", "Arabic course name", 200, required=True,
            fallback=form.get("course_name_en"),
        ),
        "year": int_field(form, errors, "year", "Year", required=True),
        "date_time": datetime_field(form, errors, "date_time", "Date and time", required=True),
        "mode": enum_field(form, "mode", ExamMode, ExamMode.IN_PERSON),
        "location": text_field(form, errors, "location", "Location", 120),
        "lms_url": text_field(form, errors, "lms_url", "LMS link", 500),
        "lms_how_to": text_field(form, errors, "lms_how_to", "LMS instructions", 500),
        "instructions": text_field(form, errors, "instructions", "Instructions", 1200),
        "has_stego_protection": bool_field(form, "has_stego_protection"),
        "department_id": int_field(form, errors, "department_id", "Department"),
    }
    return data, errors


def archive_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "course_code": text_field(form, errors, "course_code", "Course code", 20, required=True),
        "course_name_ar": text_field(form, errors, "course_name_ar", "Arabic course name", 200, required=True),
        "course_name_en": text_field(form, errors, "course_name_en", "English course name", 200, required=True),
        "term": text_field(form, errors, "term", "Term", 50),
        "pdf_url": text_field(form, errors, "pdf_url", "Paper link", 260),
        "solution_url": text_field(form, errors, "solution_url", "Solution link", 260),
    }
    return data, errors


def alert_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "title_en": text_field(form, errors, "title_en", "English title", 300, required=True),
        "title_ar": text_field(
            form, errors, "title_ar", "Arabic title", 300, required=True, fallback=form.get("title_en")
        ),
        "location": text_field(form, errors, "location", "Location", 150),
        "date": datetime_field(form, errors, "date", "Date"),
        "is_important": bool_field(form, "is_important"),
        "department_id": int_field(form, errors, "department_id", "Department"),
    }
    return data, errors


def news_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "title_en": text_field(form, errors, "title_en", "English title", 250, required=True),
        "title_ar": text_field(
            form, errors, "title_ar", "Arabic title", 250, required=True, fallback=form.get("title_en")
        ),
        "body_en": text_field(form, errors, "body_en", "English body"),
        "body_ar": text_field(form, errors, "body_ar", "Arabic body", fallback=form.get("body_en")),
        "category": enum_field(form, "category", NewsCategory, NewsCategory.ANNOUNCEMENT),
        "publish_date": datetime_field(form, errors, "publish_date", "Publish date"),
        "is_published": bool_field(form, "is_published"),
    }
    return data, errors


def support_ticket_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "full_name": text_field(form, errors, "full_name", "Full name", 200, required=True),
        "university_id": text_field(form, errors, "university_id", "University id", 50),
        "email": email_field(form, errors, "email", "Email", required=True),
        "course_exam": text_field(form, errors, "course_exam", "Course / exam", 200),
        "issue_type": enum_field(form, "issue_type", SupportIssueType, SupportIssueType.OTHER),
        "description": text_field(form, errors, "description", "Description", 2000, required=True),
    }
    return data, errors


def register_form(form: Mapping[str, str]) -> tuple[dict[str, Any], Errors]:
    errors: Errors = {}
    data = {
        "full_name": text_field(form, errors, "full_name", "Full name", 200, required=True),
        "phone": text_field(form, errors, "phone", "Phone number", 120, required=True),
        "password": form.get("password") or "",
    }
    confirm = form.get("confirm_password") or ""

    if not data["password"]:
        errors["password"] = "Password is required."
    elif len(data["password"]) < 6:
        errors["password"] = "Password must be at least 6 characters."

    if confirm != data["password"]:
        errors["confirm_password"] = "Passwords do not match."
    return data, errors


def form_values(obj: Any, names: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for name in names:
        value = getattr(obj, name, None)
        if value is None:
            values[name] = ""
        elif isinstance(value, bool):
            values[name] = "on" if value else ""
        elif isinstance(value, enum.Enum):
            values[name] = value.name
        elif isinstance(value, datetime):
            values[name] = value.strftime("%Y-%m-%dT%H:%M")
        elif isinstance(value, date):
            values[name] = value.isoformat()
        else:
            values[name] = str(value)
    return values
