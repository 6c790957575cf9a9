from __future__ import annotations

import logging
from datetime import timedelta

from flask import current_app

from engineering_portal.extensions import db
from engineering_portal.models import (
    AcademicAlert,
    Department,
    Exam,
    ExamArchiveItem,
    ExamMode,
    FacultyMember,
    NewsCategory,
    NewsItem,
    Role,
    User,
    utcnow,
)

logger = logging.getLogger(__name__)

DEMO_DEPARTMENTS = [
    ("CIV", "الهندسة المدنية", "Civil Engineering"),
    ("MECH", "الهندسة الميكانيكية", "Mechanical Engineering"),
    ("ELEC", "الهندسة الكهربائية", "Electrical Engineering"),
    ("COMP", "هندسة الحاسوب", "Computer Engineering"),
    ("IND", "الهندسة الصناعية", "Industrial Engineering"),
    ("CHEM", "الهندسة الكيميائية", "Chemical Engineering"),
]

DEMO_FACULTY = [
    {
        "full_name_ar": "د. أحمد علي",
        "full_name_en": "Dr. Ahmad Ali",
        "title_ar": "أستاذ مشارك",
        "title_en": "Associate Professor",
        "email": "ahmad.ali@mutah.edu.jo",
        "office": "C-115",
        "photo_path": "img/faculty/avatar-placeholder.svg",
        "department": "ELEC",
    },
    {
        "full_name_ar": "د. هبة زيدان",
        "full_name_en": "Dr. Heba Zeidan",
        "title_ar": "أستاذ مساعد",
        "title_en": "Assistant Professor",
        "email": "heba.zeidan@mutah.edu.jo",
        "office": "A-210",
        "photo_path": "img/faculty/avatar-placeholder.svg",
        "department": "COMP",
    },
    {
        "full_name_ar": "د. رنيم أسعد",
        "full_name_en": "Dr. Raneem Asaad",
        "title_ar": "أستاذ مساعد",
        "title_en": "Assistant Professor",
        "email": "raneem@mutah.edu.jo",
        "office": "A-210",
        "photo_path": "img/faculty/avatar-placeholder.svg",
        "department": "COMP",
    },
]


def seed_admin() -> None:
    cfg = current_app.config
    username = cfg["ADMIN_USERNAME"]
    if User.query.filter_by(username=username).first():
        return

    admin = User(username=username, full_name=cfg["ADMIN_FULL_NAME"], role=Role.ADMIN)
    admin.set_password(cfg["ADMIN_PASSWORD"])
    db.session.add(admin)
    db.session.commit()
    logger.info("Bootstrapped admin account %s", username)


def seed_departments() -> dict[str, int]:
    if not Department.query.first():
        for code, name_ar, name_en in DEMO_DEPARTMENTS:
            db.session.add(Department(code=code, name_ar=name_ar, name_en=name_en))
        db.session.commit()

    return {dep.code: dep.id for dep in Department.query.all() if dep.code}


def seed_faculty(dep_ids: dict[str, int]) -> None:
    if FacultyMember.query.first():
        return

    for row in DEMO_FACULTY:
        values = dict(row)
        department_id = dep_ids.get(values.pop("department"))
        if department_id:
            db.session.add(FacultyMember(department_id=department_id, **values))
    db.session.commit()


def seed_exams(dep_ids: dict[str, int]) -> None:
    if Exam.query.first():
        return

    today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    exams = [
        Exam(
            business_id="ee-201-circuits-fall-2025",
            department_id=dep_ids.get("ELEC"),
            year=2,
            course_code="EE201",
            course_name_ar="دوائر كهربائية (1)",
            course_name_en="Electric Circuits I",
            date_time=today + timedelta(days=20, hours=9),
            mode=ExamMode.IN_PERSON,
            location="C-115",
            instructions="احضر قبل الامتحان بـ 15 دقيقة، الهوية الجامعية مطلوبة.",
            has_stego_protection=True,
        ),
        Exam(
            business_id="cs-101-prog-online-fall-2025",
            department_id=dep_ids.get("COMP"),
            year=1,
            course_code="CS101",
            course_name_ar="البرمجة (1)",
            course_name_en="Programming I",
            date_time=today + timedelta(days=12, hours=11),
            mode=ExamMode.ONLINE,
            lms_url="https://lms.mutah.edu.jo/course/CS101/exam",
            lms_how_to="سجّل دخولك بحساب الجامعة > اختر المقرر > تبويب الامتحانات.",
            instructions="ممنوع فتح تبويبات أخرى؛ الوقت محسوب تلقائيًا.",
        ),
        Exam(
            business_id="ce-210-materials-fall-2025",
            department_id=dep_ids.get("CIV"),
            year=2,
            course_code="CE210",
            course_name_ar="مواد إنشائية",
            course_name_en="Construction Materials",
            date_time=today + timedelta(days=16, hours=13),
            mode=ExamMode.IN_PERSON,
            location="A-310",
        ),
    ]
    db.session.add_all([exam for exam in exams if exam.department_id])
    db.session.commit()


def seed_archive() -> None:
    if ExamArchiveItem.query.first():
        return

    db.session.add_all(
        [
            ExamArchiveItem(
                course_code="EE201",
                course_name_ar="دوائر كهربائية (1)",
                course_name_en="Electric Circuits I",
                term="Spring 2024",
                pdf_url="docs/archive/ee201-f25-mid.pdf",
                solution_url="docs/archive/ee201-f25-mid-sol.pdf",
            ),
            ExamArchiveItem(
                course_code="CS101",
                course_name_ar="البرمجة (1)",
                course_name_en="Programming I",
                term="Fall 2023",
                pdf_url="docs/archive/cs101-f23.pdf",
            ),
        ]
    )
    db.session.commit()


def seed_alerts(dep_ids: dict[str, int]) -> None:
    if AcademicAlert.query.first():
        return

    now = utcnow()
    db.session.add_all(
        [
            AcademicAlert(
                title_ar="إعلان موعد امتحان مختبر الدوائر",
                title_en="Circuit Lab Exam Date",
                date=now + timedelta(days=12),
                location="Hall 202",
                is_important=True,
                department_id=dep_ids.get("ELEC"),
            ),
            AcademicAlert(
                title_ar="ورشة: كتابة تقرير مشروع التخرج",
                title_en="Workshop: Graduation Project Report",
                date=now.replace(hour=11, minute=0, second=0, microsecond=0) + timedelta(days=5),
                location="Hall 105",
                department_id=dep_ids.get("IND"),
            ),
        ]
    )
    db.session.commit()


def seed_news() -> None:
    if NewsItem.query.first():
        return

    now = utcnow()
    db.session.add_all(
        [
            NewsItem(
                title_ar="افتتاح مختبر النظم الذكية",
                title_en="Opening of the Smart Systems Lab",
                body_ar="تم افتتاح مختبر النظم الذكية في الكلية...",
                body_en="The Smart Systems Lab has been opened...",
                category=NewsCategory.ANNOUNCEMENT,
                publish_date=now - timedelta(days=2),
                is_published=True,
            ),
            NewsItem(
                title_ar="ورشة تعلم الآلة",
                title_en="Machine Learning Workshop",
                body_ar="تنظم الكلية ورشة حول تعلم الآلة...",
                body_en="The Faculty will host a workshop on Machine Learning...",
                category=NewsCategory.WORKSHOP,
                publish_date=now - timedelta(days=7),
                is_published=True,
            ),
        ]
    )
    db.session.commit()


def seed_database() -> None:
    seed_admin()
    dep_ids = seed_departments()
    seed_faculty(dep_ids)
    seed_exams(dep_ids)
    seed_archive()
    seed_alerts(dep_ids)
    seed_news()
    logger.info("Seed check complete")
