from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from werkzeug.security import check_password_hash, generate_password_hash

from engineering_portal.extensions import db


def utcnow() -> datetime:
    # SQLite stores naive datetimes; keep every timestamp naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_business_id() -> str:
    return uuid.uuid4().hex


class Role(str, enum.Enum):
    USER = "User"
    ADMIN = "Admin"


class ExamMode(str, enum.Enum):
    IN_PERSON = "InPerson"
    ONLINE = "Online"


class NewsCategory(str, enum.Enum):
    ANNOUNCEMENT = "Announcement"
    WORKSHOP = "Workshop"
    CONFERENCE = "Conference"
    OTHER = "Other"


class SupportIssueType(enum.IntEnum):
    CANNOT_ACCESS_EXAM = 0
    ACCOUNT_PROBLEM = 1
    CONTENT_ERROR = 2
    OTHER = 9


class Department(db.Model):
    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(10), index=True)
    name_ar = db.Column(db.String(200), nullable=False)
    name_en = db.Column(db.String(200), nullable=False)
    description_ar = db.Column(db.String(1000))
    description_en = db.Column(db.String(1000))
    image_path = db.Column(db.String(260))

    faculty_members = db.relationship("FacultyMember", back_populates="department", passive_deletes="all")
    exams = db.relationship("Exam", back_populates="department", passive_deletes="all")

    def __repr__(self) -> str:
        return f"<Department {self.code or self.id}>"


class FacultyMember(db.Model):
    __tablename__ = "faculty_members"

    id = db.Column(db.Integer, primary_key=True)
    full_name_ar = db.Column(db.String(200), nullable=False)
    full_name_en = db.Column(db.String(200), nullable=False)
    title_ar = db.Column(db.String(120))
    title_en = db.Column(db.String(120))
    email = db.Column(db.String(320))
    office = db.Column(db.String(100))
    photo_path = db.Column(db.String(260))
    department_id = db.Column(
        db.Integer,
        db.ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
    )

    department = db.relationship("Department", back_populates="faculty_members")


class Exam(db.Model):
    __tablename__ = "exams"
    __table_args__ = (db.Index("ix_exams_course_code_date_time", "course_code", "date_time"),)

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.String(50), nullable=False, default=new_business_id)
    course_code = db.Column(db.String(20), nullable=False)
    course_name_ar = db.Column(db.String(200), nullable=False)
    course_name_en = db.Column(db.String(200), nullable=False)
    year = db.Column(db.Integer, nullable=False, default=1)
    date_time = db.Column(db.DateTime, nullable=False)
    mode = db.Column(db.Enum(ExamMode, native_enum=False), nullable=False, default=ExamMode.IN_PERSON)
    location = db.Column(db.String(120))
    lms_url = db.Column(db.String(500))
    lms_how_to = db.Column(db.String(500))
    instructions = db.Column(db.String(1200))
    has_stego_protection = db.Column(db.Boolean, nullable=False, default=False)
    department_id = db.Column(
        db.Integer,
        db.ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
    )

    department = db.relationship("Department", back_populates="exams")


class ExamArchiveItem(db.Model):
    __tablename__ = "exam_archive_items"

    id = db.Column(db.Integer, primary_key=True)
    course_code = db.Column(db.String(20), nullable=False)
    course_name_ar = db.Column(db.String(200), nullable=False)
    course_name_en = db.Column(db.String(200), nullable=False)
    term = db.Column(db.String(50))
    pdf_url = db.Column(db.String(260))
    solution_url = db.Column(db.String(260))


class AcademicAlert(db.Model):
    __tablename__ = "academic_alerts"

    id = db.Column(db.Integer, primary_key=True)
    title_ar = db.Column(db.String(300), nullable=False)
    title_en = db.Column(db.String(300), nullable=False)
    location = db.Column(db.String(150))
    date = db.Column(db.DateTime)
    is_important = db.Column(db.Boolean, nullable=False, default=False)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="SET NULL"))

    department = db.relationship("Department")


class NewsItem(db.Model):
    __tablename__ = "news_items"

    id = db.Column(db.Integer, primary_key=True)
    title_ar = db.Column(db.String(250), nullable=False)
    title_en = db.Column(db.String(250), nullable=False)
    body_ar = db.Column(db.Text)
    body_en = db.Column(db.Text)
    category = db.Column(
        db.Enum(NewsCategory, native_enum=False),
        nullable=False,
        default=NewsCategory.ANNOUNCEMENT,
    )
    publish_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    image_path = db.Column(db.String(260))
    is_published = db.Column(db.Boolean, nullable=False, default=True)


class SupportTicket(db.Model):
    __tablename__ = "support_tickets"

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(200), nullable=False)
    university_id = db.Column(db.String(50))
    email = db.Column(db.String(320), nullable=False)
    course_exam = db.Column(db.String(200))
    issue_type = db.Column(
        db.Enum(SupportIssueType, native_enum=False),
        nullable=False,
        default=SupportIssueType.CANNOT_ACCESS_EXAM,
    )
    description = db.Column(db.String(2000), nullable=False)
    screenshot_path = db.Column(db.String(260))
    admin_reply = db.Column(db.String(4000))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    replied_at = db.Column(db.DateTime)
    is_resolved = db.Column(db.Boolean, nullable=False, default=False)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # Phone number for local accounts, email (or provider key) for external ones.
    username = db.Column(db.String(120), nullable=False, index=True)
    full_name = db.Column(db.String(200))
    password_hash = db.Column(db.String(255))
    role = db.Column(db.Enum(Role, native_enum=False), nullable=False, default=Role.USER)
    provider = db.Column(db.String(50))
    provider_key = db.Column(db.String(200))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def set_password(self, raw: str) -> None:
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, raw)
