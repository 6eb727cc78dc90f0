"""Entity kinds understood by the restore pipeline.

Declaration order matters only as a tie-breaker: the pipeline order is computed
from ``depends_on`` edges, and kinds without an ordering constraint keep the
order in which they are declared here.
"""

from __future__ import annotations

from .kinds import EntityKind
from .ordering import dependency_order

LINK_CREATE_ONLY: tuple[str, ...] = ("id", "createdAt", "updatedAt")

ROLES = EntityKind(
    name="roles",
    fields=("name", "description", "isSystem"),
)

PERMISSIONS = EntityKind(
    name="permissions",
    fields=("name", "description", "resource", "action"),
)

ROLE_PERMISSIONS = EntityKind(
    name="role_permissions",
    key=("roleId", "permissionId"),
    fields=(),
    create_only=LINK_CREATE_ONLY,
    depends_on=("roles", "permissions"),
)

SUBJECTS = EntityKind(
    name="subjects",
    fields=("subjectCode", "subjectName", "description", "credits", "isActive"),
)

TEACHERS = EntityKind(
    name="teachers",
    fields=("teacherId", "fullName", "email", "phone", "subject", "hireDate", "isActive"),
)

TEACHER_SUBJECTS = EntityKind(
    name="teacher_subjects",
    key=("teacherId", "subjectId"),
    fields=(),
    create_only=LINK_CREATE_ONLY,
    depends_on=("teachers", "subjects"),
)

COURSES = EntityKind(
    name="courses",
    fields=(
        "courseCode",
        "courseName",
        "subjectArea",
        "instructor",
        "maxStudents",
        "currentEnrollment",
        "duration",
        "platform",
        "meetingUrl",
        "prerequisites",
        "description",
        "isActive",
    ),
)

COURSE_SESSIONS = EntityKind(
    name="course_sessions",
    fields=(
        "subjectId",
        "teacherId",
        "courseId",
        "startTime",
        "endTime",
        "dayOfWeek",
        "isActive",
    ),
    depends_on=("subjects", "teachers", "courses"),
)

COURSE_CONTENTS = EntityKind(
    name="course_contents",
    fields=(
        "courseId",
        "subjectId",
        "subjectLabel",
        "title",
        "contentType",
        "url",
        "description",
        "additionalInfo",
        "orderIndex",
        "isPublished",
        "createdById",
    ),
    depends_on=("subjects", "teachers", "courses"),
)

STUDENTS = EntityKind(
    name="students",
    fields=(
        "studentId",
        "matriculationNumber",
        "fullName",
        "dateOfBirth",
        "age",
        "gender",
        "address",
        "grade",
        "phoneNumber",
        "emailAddress",
        "emergencyContactName",
        "emergencyContactRelationship",
        "emergencyContactPhone",
        "parentGuardianName",
        "parentGuardianPhone",
        "parentGuardianEmail",
        "enrollmentDate",
        "graduationYear",
        "currentClass",
        "medications",
        "allergies",
        "specialNeeds",
        "dietaryRestrictions",
        "parentalPermissionGranted",
        "parentalPermissionDate",
        "isActive",
        "academicYear",
        "qrCode",
        "attendanceMarked",
        "attendanceMarkedAt",
        "attendanceMarkedBy",
    ),
)

# One allocation per student: the natural key is the student alone.
COURSE_ALLOCATIONS = EntityKind(
    name="course_allocations",
    key=("studentId",),
    fields=("courseId", "allocatedAt", "allocatedBy", "isActive"),
    create_only=LINK_CREATE_ONLY,
    depends_on=("students", "courses"),
)

REGISTRATIONS = EntityKind(
    name="registrations",
    aliases=("registration",),
    fields=(
        "fullName",
        "dateOfBirth",
        "age",
        "gender",
        "address",
        "officePostalAddress",
        "branch",
        "phoneNumber",
        "emailAddress",
        "matriculationNumber",
        "courseDesired",
        "maritalStatus",
        "spouseName",
        "placeOfBirth",
        "origin",
        "presentOccupation",
        "placeOfWork",
        "positionHeldInOffice",
        "acceptedJesusChrist",
        "whenAcceptedJesus",
        "churchAffiliation",
        "schoolsAttended",
        "emergencyContactName",
        "emergencyContactRelationship",
        "emergencyContactPhone",
        "parentGuardianName",
        "parentGuardianPhone",
        "parentGuardianEmail",
        "parentalPermissionGranted",
        "parentalPermissionDate",
        "isVerified",
        "verifiedAt",
        "verifiedBy",
    ),
)

ROOMS = EntityKind(
    name="rooms",
    fields=("name", "gender", "capacity", "description", "isActive"),
)

ROOM_ALLOCATIONS = EntityKind(
    name="room_allocations",
    key=("registrationId",),
    fields=("roomId", "allocatedAt", "allocatedBy", "metadata", "isActive"),
    create_only=LINK_CREATE_ONLY,
    depends_on=("rooms", "registrations"),
)

CLASS_SECTION_ALLOCATIONS = EntityKind(
    name="class_section_allocations",
    fields=("studentId", "classSectionName", "allocatedAt", "allocatedBy", "isActive"),
    depends_on=("students",),
)

CLASS_SECTION_PARTICIPANTS = EntityKind(
    name="class_section_participants",
    fields=("studentId", "classSectionId", "joinedAt", "isActive"),
    depends_on=("students",),
)

PLATOON_EMAIL_HISTORY = EntityKind(
    name="platoon_email_history",
    fields=(
        "platoonId",
        "subject",
        "message",
        "emailTarget",
        "recipientCount",
        "successCount",
        "failedCount",
        "sentBy",
        "senderName",
        "senderEmail",
    ),
)

GRADES = EntityKind(
    name="grades",
    fields=(
        "studentId",
        "subjectId",
        "teacherId",
        "gradeValue",
        "maxGrade",
        "gradeType",
        "description",
        "gradedAt",
    ),
    depends_on=("students", "subjects", "teachers"),
)

MESSAGES = EntityKind(
    name="messages",
    fields=(
        "subject",
        "content",
        "senderEmail",
        "senderName",
        "recipientEmail",
        "recipientName",
        "senderType",
        "recipientType",
        "status",
        "error",
        "sentAt",
        "deliveredAt",
        "readAt",
    ),
)

CALENDAR_EVENTS = EntityKind(
    name="calendar_events",
    fields=(
        "title",
        "description",
        "eventType",
        "startDate",
        "endDate",
        "isRecurring",
        "recurrencePattern",
        "academicYear",
        "isActive",
    ),
)

# Reconciled by the settings merge pass; fields listed here are used for export.
SETTINGS = EntityKind(
    name="settings",
    key=("category", "key"),
    fields=("name", "value", "type", "options", "description", "isSystem"),
    create_only=LINK_CREATE_ONLY,
    label_field="key",
)

SYSTEM_CONFIG = EntityKind(
    name="system_config",
    key=("key",),
    fields=("value", "description"),
    create_only=LINK_CREATE_ONLY,
    label_field="key",
)

SMS_VERIFICATIONS = EntityKind(
    name="sms_verifications",
    fields=("phoneNumber", "code", "expiresAt", "attempts", "verified"),
)

LOGIN_ATTEMPTS = EntityKind(
    name="login_attempts",
    key=("email", "ipAddress"),
    fields=("attempts", "lastAttempt", "lockedUntil"),
    create_only=LINK_CREATE_ONLY,
)

DECLARED_KINDS: tuple[EntityKind, ...] = (
    ROLES,
    PERMISSIONS,
    ROLE_PERMISSIONS,
    SUBJECTS,
    TEACHERS,
    TEACHER_SUBJECTS,
    COURSES,
    COURSE_SESSIONS,
    COURSE_CONTENTS,
    STUDENTS,
    COURSE_ALLOCATIONS,
    REGISTRATIONS,
    ROOMS,
    ROOM_ALLOCATIONS,
    CLASS_SECTION_ALLOCATIONS,
    CLASS_SECTION_PARTICIPANTS,
    PLATOON_EMAIL_HISTORY,
    GRADES,
    MESSAGES,
    CALENDAR_EVENTS,
    SETTINGS,
    SYSTEM_CONFIG,
    SMS_VERIFICATIONS,
    LOGIN_ATTEMPTS,
)

RESTORE_ORDER: tuple[EntityKind, ...] = dependency_order(DECLARED_KINDS)
KIND_BY_NAME: dict[str, EntityKind] = {kind.name: kind for kind in DECLARED_KINDS}

# Snapshot sections that carry metadata rather than records.
METADATA_SECTIONS: frozenset[str] = frozenset({"system_info"})
