from __future__ import annotations

import pytest

from golf_course_admin.auth.models import Role
from golf_course_admin.auth.roles import (
    at_least,
    can_manage,
    ensure_can_assign,
    ensure_can_manage,
    require_at_least,
    role_level,
)
from golf_course_admin.domain.entities.course_user import CourseUser
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import InsufficientRole


def staff(user_id: int, role: str, course_id: int = 1) -> CourseUser:
    return CourseUser(id=user_id, username=f"user{user_id}", golf_course_id=course_id, role=role)


def admin(user_id: int) -> SystemUser:
    return SystemUser(id=user_id, name=f"admin{user_id}")


@pytest.mark.parametrize(
    "role, required, expected",
    [
        (Role.STAFF, Role.MANAGER, False),
        (Role.OWNER, Role.STAFF, True),
        (Role.MANAGER, Role.MANAGER, True),
        (Role.MANAGER, Role.OWNER, False),
        (Role.OWNER, Role.OWNER, True),
        ("STAFF", "STAFF", True),
        ("JANITOR", Role.STAFF, False),
        ("", Role.STAFF, False),
        (None, Role.STAFF, False),
        ("manager", Role.STAFF, False),
        ("MANAGER:5", Role.STAFF, False),
    ],
)
def test_at_least(role, required, expected) -> None:
    assert at_least(role, required) is expected


def test_unknown_required_role_grants_nothing() -> None:
    assert at_least(Role.OWNER, "SUPERUSER") is False


def test_levels_are_ordered() -> None:
    assert role_level("JANITOR") == 0
    assert role_level(Role.STAFF) < role_level(Role.MANAGER) < role_level(Role.OWNER)


def test_at_least_reads_principal_role() -> None:
    assert at_least(staff(1, "OWNER"), Role.MANAGER) is True
    assert at_least(staff(1, "STAFF"), Role.MANAGER) is False


def test_require_at_least_raises() -> None:
    require_at_least(staff(1, "MANAGER"), Role.MANAGER)
    with pytest.raises(InsufficientRole):
        require_at_least(staff(1, "STAFF"), Role.MANAGER)


@pytest.mark.parametrize(
    "actor_role, target_role, expected",
    [
        ("OWNER", "OWNER", True),
        ("OWNER", "STAFF", True),
        ("MANAGER", "MANAGER", True),
        ("MANAGER", "STAFF", True),
        ("MANAGER", "OWNER", False),
        ("STAFF", "MANAGER", False),
        ("JANITOR", "STAFF", False),
    ],
)
def test_can_manage_follows_hierarchy(actor_role, target_role, expected) -> None:
    assert can_manage(staff(1, actor_role), staff(2, target_role)) is expected


@pytest.mark.parametrize("role", ["STAFF", "MANAGER", "OWNER"])
def test_course_user_cannot_manage_self(role) -> None:
    me = staff(1, role)
    assert can_manage(me, staff(1, role)) is False
    with pytest.raises(InsufficientRole):
        ensure_can_manage(me, me)


def test_system_admin_cannot_manage_self() -> None:
    assert can_manage(admin(1), admin(1)) is False
    with pytest.raises(InsufficientRole):
        ensure_can_manage(admin(1), admin(1))


def test_system_admin_manages_other_admins_and_staff() -> None:
    assert can_manage(admin(1), admin(2)) is True
    # same numeric id in the other store is a different principal
    assert can_manage(admin(1), staff(1, "OWNER")) is True


def test_ensure_can_manage_refuses_superior() -> None:
    with pytest.raises(InsufficientRole):
        ensure_can_manage(staff(1, "MANAGER"), staff(2, "OWNER"))


def test_ensure_can_assign() -> None:
    manager = staff(1, "MANAGER")
    ensure_can_assign(manager, Role.STAFF)
    ensure_can_assign(manager, Role.MANAGER)
    with pytest.raises(InsufficientRole):
        ensure_can_assign(manager, Role.OWNER)
    ensure_can_assign(admin(1), Role.OWNER)
