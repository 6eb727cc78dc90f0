from __future__ import annotations

import pytest

from snaprestore.domain.restore import EntityKind
from snaprestore.domain.restore.kinds import camel_case

LINKS = EntityKind(
    name="role_permissions",
    key=("roleId", "permissionId"),
    fields=(),
    create_only=("id", "createdAt", "updatedAt"),
)

ROLES = EntityKind(name="roles", fields=("name", "description"))


def test_camel_case_converts_snake_names() -> None:
    assert camel_case("course_allocations") == "courseAllocations"
    assert camel_case("platoon_email_history") == "platoonEmailHistory"
    assert camel_case("roles") == "roles"


def test_spellings_include_camel_case_and_aliases_once() -> None:
    kind = EntityKind(name="registrations", fields=("fullName",), aliases=("registration",))

    assert kind.spellings == ("registrations", "registration")
    assert LINKS.spellings == ("role_permissions", "rolePermissions")


def test_records_in_prefers_first_spelling_holding_a_list() -> None:
    payload = {"rolePermissions": [{"roleId": "r1"}], "role_permissions": "not-a-list"}

    assert LINKS.records_in(payload) == [{"roleId": "r1"}]


def test_records_in_returns_none_when_kind_absent() -> None:
    assert ROLES.records_in({"permissions": []}) is None
    assert ROLES.records_in({"roles": {"id": "x"}}) is None


def test_natural_key_rejects_missing_and_blank_fields() -> None:
    assert LINKS.natural_key({"roleId": "r1", "permissionId": "p1"}) == {
        "roleId": "r1",
        "permissionId": "p1",
    }
    assert LINKS.natural_key({"roleId": "r1"}) is None
    assert LINKS.natural_key({"roleId": "r1", "permissionId": "  "}) is None
    assert ROLES.natural_key({"id": None, "name": "admin"}) is None


def test_label_falls_back_to_key_values_then_unknown() -> None:
    assert ROLES.label({"id": "role-1"}) == "role-1"
    assert LINKS.label({"roleId": "r1", "permissionId": "p1"}) == "r1/p1"
    assert LINKS.label({"roleId": "r1"}) == "unknown"


def test_update_values_never_include_create_only_fields() -> None:
    record = {
        "id": "role-1",
        "name": "admin",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-02-01T00:00:00Z",
        "unrelated": True,
    }

    assert ROLES.update_values(record) == {"name": "admin"}


def test_insert_values_carry_key_fields_and_create_only_fields() -> None:
    record = {"roleId": "r1", "permissionId": "p1", "id": "link-1", "createdAt": "x"}

    assert LINKS.insert_values(record) == {
        "roleId": "r1",
        "permissionId": "p1",
        "id": "link-1",
        "createdAt": "x",
    }


def test_descriptor_rejects_overlapping_field_groups() -> None:
    with pytest.raises(ValueError, match="both always-write and create-only"):
        EntityKind(name="broken", fields=("createdAt",))


def test_descriptor_requires_a_key() -> None:
    with pytest.raises(ValueError, match="at least one key field"):
        EntityKind(name="broken", fields=(), key=())
