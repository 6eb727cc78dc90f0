"""SQLAlchemy table metadata for the live record store.

Every table is named after its entity kind. Column names are snake_case in the
database while column keys keep the snapshot's camelCase field names, so the
store can be addressed with snapshot records directly.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

ID_LENGTH: Final[int] = 64


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware UTC datetimes that also accept ISO-8601 strings on write."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if isinstance(value, str):
            normalized = value.strip()
            if normalized.endswith("Z"):
                normalized = normalized[:-1] + "+00:00"
            value = datetime.fromisoformat(normalized)
        if not isinstance(value, datetime):
            raise TypeError(f"Expected a datetime or ISO-8601 string, got {type(value).__name__}")
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def col(key: str, type_: Any, *args: Any, **kwargs: Any) -> Column[Any]:
    """Column stored as snake_case and addressed by its camelCase snapshot field name."""

    kwargs.setdefault("nullable", True)
    return Column(_snake(key), type_, *args, key=key, **kwargs)


def id_col() -> Column[Any]:
    return col("id", String(ID_LENGTH), primary_key=True, default=_new_id, nullable=False)


def ref_col(key: str, target: str, *, nullable: bool = True) -> Column[Any]:
    return col(
        key,
        String(ID_LENGTH),
        ForeignKey(f"{target}.id", ondelete="CASCADE"),
        nullable=nullable,
    )


def timestamp_cols() -> tuple[Column[Any], Column[Any]]:
    return (
        col("createdAt", UTCDateTime(), default=_utcnow, nullable=False),
        col("updatedAt", UTCDateTime(), default=_utcnow, nullable=False),
    )


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Access control -----------------------------------------------------------------

roles_table = Table(
    "roles",
    metadata,
    id_col(),
    col("name", String, nullable=False, unique=True),
    col("description", Text),
    col("isSystem", Boolean, default=False),
    *timestamp_cols(),
)

permissions_table = Table(
    "permissions",
    metadata,
    id_col(),
    col("name", String, nullable=False, unique=True),
    col("description", Text),
    col("resource", String),
    col("action", String),
    *timestamp_cols(),
)

role_permissions_table = Table(
    "role_permissions",
    metadata,
    id_col(),
    ref_col("roleId", "roles", nullable=False),
    ref_col("permissionId", "permissions", nullable=False),
    *timestamp_cols(),
    UniqueConstraint("roleId", "permissionId"),
)

# Teaching -----------------------------------------------------------------------

subjects_table = Table(
    "subjects",
    metadata,
    id_col(),
    col("subjectCode", String, nullable=False, unique=True),
    col("subjectName", String, nullable=False),
    col("description", Text),
    col("credits", Integer),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

teachers_table = Table(
    "teachers",
    metadata,
    id_col(),
    col("teacherId", String, unique=True),
    col("fullName", String, nullable=False),
    col("email", String, unique=True),
    col("phone", String),
    col("subject", String),
    col("hireDate", UTCDateTime()),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

teacher_subjects_table = Table(
    "teacher_subjects",
    metadata,
    id_col(),
    ref_col("teacherId", "teachers", nullable=False),
    ref_col("subjectId", "subjects", nullable=False),
    *timestamp_cols(),
    UniqueConstraint("teacherId", "subjectId"),
)

courses_table = Table(
    "courses",
    metadata,
    id_col(),
    col("courseCode", String, nullable=False, unique=True),
    col("courseName", String, nullable=False),
    col("subjectArea", String),
    col("instructor", String),
    col("maxStudents", Integer),
    col("currentEnrollment", Integer),
    col("duration", String),
    col("platform", String),
    col("meetingUrl", String),
    col("prerequisites", Text),
    col("description", Text),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

course_sessions_table = Table(
    "course_sessions",
    metadata,
    id_col(),
    ref_col("subjectId", "subjects"),
    ref_col("teacherId", "teachers"),
    ref_col("courseId", "courses"),
    col("startTime", String),
    col("endTime", String),
    col("dayOfWeek", String),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

course_contents_table = Table(
    "course_contents",
    metadata,
    id_col(),
    ref_col("courseId", "courses", nullable=False),
    ref_col("subjectId", "subjects"),
    col("subjectLabel", String),
    col("title", String, nullable=False),
    col("contentType", String),
    col("url", String),
    col("description", Text),
    col("additionalInfo", JSON),
    col("orderIndex", Integer),
    col("isPublished", Boolean, default=False),
    col("createdById", String(ID_LENGTH)),
    *timestamp_cols(),
)

# Students and registrations -----------------------------------------------------

students_table = Table(
    "students",
    metadata,
    id_col(),
    col("studentId", String, unique=True),
    col("matriculationNumber", String),
    col("fullName", String, nullable=False),
    col("dateOfBirth", UTCDateTime()),
    col("age", Integer),
    col("gender", String),
    col("address", Text),
    col("grade", String),
    col("phoneNumber", String),
    col("emailAddress", String),
    col("emergencyContactName", String),
    col("emergencyContactRelationship", String),
    col("emergencyContactPhone", String),
    col("parentGuardianName", String),
    col("parentGuardianPhone", String),
    col("parentGuardianEmail", String),
    col("enrollmentDate", UTCDateTime()),
    col("graduationYear", Integer),
    col("currentClass", String),
    col("medications", Text),
    col("allergies", Text),
    col("specialNeeds", Text),
    col("dietaryRestrictions", Text),
    col("parentalPermissionGranted", Boolean),
    col("parentalPermissionDate", UTCDateTime()),
    col("isActive", Boolean, default=True),
    col("academicYear", String),
    col("qrCode", Text),
    col("attendanceMarked", Boolean, default=False),
    col("attendanceMarkedAt", UTCDateTime()),
    col("attendanceMarkedBy", String),
    *timestamp_cols(),
)

course_allocations_table = Table(
    "course_allocations",
    metadata,
    id_col(),
    ref_col("studentId", "students", nullable=False),
    ref_col("courseId", "courses", nullable=False),
    col("allocatedAt", UTCDateTime(), default=_utcnow),
    col("allocatedBy", String),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
    UniqueConstraint("studentId"),
)

registrations_table = Table(
    "registrations",
    metadata,
    id_col(),
    col("fullName", String, nullable=False),
    col("dateOfBirth", UTCDateTime()),
    col("age", Integer),
    col("gender", String),
    col("address", Text),
    col("officePostalAddress", Text),
    col("branch", String),
    col("phoneNumber", String),
    col("emailAddress", String),
    col("matriculationNumber", String),
    col("courseDesired", String),
    col("maritalStatus", String),
    col("spouseName", String),
    col("placeOfBirth", String),
    col("origin", String),
    col("presentOccupation", String),
    col("placeOfWork", String),
    col("positionHeldInOffice", String),
    col("acceptedJesusChrist", Boolean),
    col("whenAcceptedJesus", String),
    col("churchAffiliation", String),
    col("schoolsAttended", Text),
    col("emergencyContactName", String),
    col("emergencyContactRelationship", String),
    col("emergencyContactPhone", String),
    col("parentGuardianName", String),
    col("parentGuardianPhone", String),
    col("parentGuardianEmail", String),
    col("parentalPermissionGranted", Boolean),
    col("parentalPermissionDate", UTCDateTime()),
    col("isVerified", Boolean, default=False),
    col("verifiedAt", UTCDateTime()),
    col("verifiedBy", String),
    *timestamp_cols(),
)

# Accommodation ------------------------------------------------------------------

rooms_table = Table(
    "rooms",
    metadata,
    id_col(),
    col("name", String, nullable=False, unique=True),
    col("gender", String),
    col("capacity", Integer),
    col("description", Text),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

room_allocations_table = Table(
    "room_allocations",
    metadata,
    id_col(),
    ref_col("registrationId", "registrations", nullable=False),
    ref_col("roomId", "rooms", nullable=False),
    col("allocatedAt", UTCDateTime(), default=_utcnow),
    col("allocatedBy", String),
    col("metadata", JSON),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
    UniqueConstraint("registrationId"),
)

# Class sections -----------------------------------------------------------------

class_section_allocations_table = Table(
    "class_section_allocations",
    metadata,
    id_col(),
    ref_col("studentId", "students", nullable=False),
    col("classSectionName", String),
    col("allocatedAt", UTCDateTime(), default=_utcnow),
    col("allocatedBy", String),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

class_section_participants_table = Table(
    "class_section_participants",
    metadata,
    id_col(),
    ref_col("studentId", "students", nullable=False),
    col("classSectionId", String(ID_LENGTH)),
    col("joinedAt", UTCDateTime(), default=_utcnow),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

platoon_email_history_table = Table(
    "platoon_email_history",
    metadata,
    id_col(),
    col("platoonId", String(ID_LENGTH)),
    col("subject", String),
    col("message", Text),
    col("emailTarget", String),
    col("recipientCount", Integer),
    col("successCount", Integer),
    col("failedCount", Integer),
    col("sentBy", String),
    col("senderName", String),
    col("senderEmail", String),
    *timestamp_cols(),
)

# Grades, messaging, calendar ----------------------------------------------------

grades_table = Table(
    "grades",
    metadata,
    id_col(),
    ref_col("studentId", "students", nullable=False),
    ref_col("subjectId", "subjects"),
    ref_col("teacherId", "teachers"),
    col("gradeValue", Float),
    col("maxGrade", Float),
    col("gradeType", String),
    col("description", Text),
    col("gradedAt", UTCDateTime()),
    *timestamp_cols(),
)

messages_table = Table(
    "messages",
    metadata,
    id_col(),
    col("subject", String),
    col("content", Text),
    col("senderEmail", String),
    col("senderName", String),
    col("recipientEmail", String),
    col("recipientName", String),
    col("senderType", String),
    col("recipientType", String),
    col("status", String),
    col("error", Text),
    col("sentAt", UTCDateTime()),
    col("deliveredAt", UTCDateTime()),
    col("readAt", UTCDateTime()),
    *timestamp_cols(),
)

calendar_events_table = Table(
    "calendar_events",
    metadata,
    id_col(),
    col("title", String, nullable=False),
    col("description", Text),
    col("eventType", String),
    col("startDate", UTCDateTime()),
    col("endDate", UTCDateTime()),
    col("isRecurring", Boolean, default=False),
    col("recurrencePattern", String),
    col("academicYear", String),
    col("isActive", Boolean, default=True),
    *timestamp_cols(),
)

# Configuration ------------------------------------------------------------------

settings_table = Table(
    "settings",
    metadata,
    id_col(),
    col("category", String, nullable=False),
    col("key", String, nullable=False),
    col("name", String, nullable=False),
    col("value", Text, nullable=False),
    col("type", String, nullable=False),
    col("options", JSON),
    col("description", Text),
    col("isSystem", Boolean, default=False, nullable=False),
    *timestamp_cols(),
    UniqueConstraint("category", "key"),
)

system_config_table = Table(
    "system_config",
    metadata,
    id_col(),
    col("key", String, nullable=False, unique=True),
    col("value", Text, nullable=False),
    col("description", Text),
    *timestamp_cols(),
)

# Security -----------------------------------------------------------------------

sms_verifications_table = Table(
    "sms_verifications",
    metadata,
    id_col(),
    col("phoneNumber", String, nullable=False),
    col("code", String, nullable=False),
    col("expiresAt", UTCDateTime()),
    col("attempts", Integer, default=0),
    col("verified", Boolean, default=False),
    *timestamp_cols(),
)

login_attempts_table = Table(
    "login_attempts",
    metadata,
    id_col(),
    col("email", String, nullable=False),
    col("ipAddress", String, nullable=False),
    col("attempts", Integer, default=0),
    col("lastAttempt", UTCDateTime()),
    col("lockedUntil", UTCDateTime()),
    *timestamp_cols(),
    UniqueConstraint("email", "ipAddress"),
)

TABLE_BY_KIND: Final[dict[str, Table]] = {table.name: table for table in metadata.sorted_tables}


def create_all_tables(engine: Engine) -> None:
    log.debug("Creating %s restore tables", len(TABLE_BY_KIND))
    metadata.create_all(engine)
