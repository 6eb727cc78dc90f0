from __future__ import annotations

from typing import TYPE_CHECKING

from snaprestore.app import export_snapshot_bytes, restore_snapshot
from snaprestore.config import RestoreConfig
from snaprestore.domain.restore import RESTORE_ORDER, OutcomeAction
from tests.support.records import email_settings, make_snapshot

if TYPE_CHECKING:
    from collections.abc import Callable

    from snaprestore.adapters.sqlalchemy import SqlAlchemyRestoreUnitOfWork

CONFIG = RestoreConfig()


def _school_snapshot() -> dict[str, object]:
    return {
        "roles": [{"id": "r1", "name": "Admin", "createdAt": "2024-01-01T00:00:00Z"}],
        "permissions": [{"id": "p1", "name": "students.read", "resource": "students"}],
        "rolePermissions": [{"roleId": "r1", "permissionId": "p1"}],
        "subjects": [{"id": "s1", "subjectCode": "MATH", "subjectName": "Mathematics"}],
        "teachers": [{"id": "t1", "fullName": "Grace Hopper", "email": "grace@example.org"}],
        "teacher_subjects": [{"teacherId": "t1", "subjectId": "s1"}],
        "courses": [{"id": "c1", "courseCode": "M101", "courseName": "Algebra"}],
        "students": [
            {"id": "st1", "studentId": "S-1", "fullName": "Ada", "dateOfBirth": "2010-02-03"},
        ],
        "course_allocations": [{"studentId": "st1", "courseId": "c1"}],
        "registrations": [{"id": "reg1", "fullName": "Ada"}],
        "rooms": [{"id": "room1", "name": "North", "capacity": 4}],
        "room_allocations": [
            {"registrationId": "reg1", "roomId": "room1", "metadata": {"bed": 2}},
        ],
        "grades": [{"id": "g1", "studentId": "st1", "subjectId": "s1", "gradeValue": 9.5}],
        "settings": email_settings(),
        "system_config": [{"key": "maintenance", "value": "false"}],
        "login_attempts": [{"email": "ada@example.org", "ipAddress": "10.0.0.1", "attempts": 2}],
    }


def _dump_store(factory: Callable[[], SqlAlchemyRestoreUnitOfWork]) -> dict[str, object]:
    with factory() as uow:
        records = uow.repositories.records
        return {kind.name: records.find_many(kind.name) for kind in RESTORE_ORDER}


def test_full_snapshot_restores_into_sqlite(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRestoreUnitOfWork],
) -> None:
    report = restore_snapshot(
        make_snapshot(_school_snapshot(), system_info={"version": "2.1"}),
        unit_of_work_factory=sqlite_unit_of_work,
        config=CONFIG,
    )

    payload = report.as_dict()
    assert payload["summary"]["skipped"] == 0
    assert payload["summary"]["imported"] == payload["summary"]["total"] == 19
    assert payload["capability_status"]["configured"] is True
    assert payload["backup_info"] == {"version": "2.1"}

    stored = _dump_store(sqlite_unit_of_work)
    assert stored["room_allocations"][0]["metadata"] == {"bed": 2}
    assert stored["course_allocations"][0]["courseId"] == "c1"


def test_second_restore_reports_no_imports_and_changes_nothing(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRestoreUnitOfWork],
) -> None:
    raw = make_snapshot(_school_snapshot())
    restore_snapshot(raw, unit_of_work_factory=sqlite_unit_of_work, config=CONFIG)
    before = _dump_store(sqlite_unit_of_work)

    report = restore_snapshot(raw, unit_of_work_factory=sqlite_unit_of_work, config=CONFIG)

    assert report.summary.imported == 0
    assert report.summary.skipped == 0
    assert _dump_store(sqlite_unit_of_work) == before


def test_duplicate_teacher_email_skips_only_that_teacher(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRestoreUnitOfWork],
) -> None:
    teachers = [
        {"id": f"t{index}", "fullName": f"Teacher {index}", "email": f"t{index}@example.org"}
        for index in range(5)
    ]
    teachers[2]["email"] = "t0@example.org"

    report = restore_snapshot(
        make_snapshot({"teachers": teachers}),
        unit_of_work_factory=sqlite_unit_of_work,
        config=CONFIG,
    )

    assert report.summary.skipped == 1
    assert report.summary.errors == ("teachers:t2",)
    assert [o.action for o in report.summary.outcomes].count(OutcomeAction.IMPORTED) == 4
    assert len(_dump_store(sqlite_unit_of_work)["teachers"]) == 4


def test_missing_parent_skips_child_record_only(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRestoreUnitOfWork],
) -> None:
    report = restore_snapshot(
        make_snapshot(
            {
                "roles": [{"id": "r1", "name": "Admin"}],
                "role_permissions": [{"roleId": "r1", "permissionId": "ghost"}],
            }
        ),
        unit_of_work_factory=sqlite_unit_of_work,
        config=CONFIG,
    )

    assert report.summary.imported == 1
    assert report.summary.errors == ("role_permissions:r1/ghost",)


def test_export_round_trips_through_restore(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRestoreUnitOfWork],
) -> None:
    restore_snapshot(
        make_snapshot(_school_snapshot()),
        unit_of_work_factory=sqlite_unit_of_work,
        config=CONFIG,
    )

    exported = export_snapshot_bytes(unit_of_work_factory=sqlite_unit_of_work)
    report = restore_snapshot(exported, unit_of_work_factory=sqlite_unit_of_work, config=CONFIG)

    assert report.summary.imported == 0
    assert report.summary.skipped == 0
    assert report.summary.updated == 19
    assert report.backup_info is not None
