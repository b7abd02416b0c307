from __future__ import annotations

import pytest

from golf_course_admin.domain.entities.course_user import (
    AdminCourseUserCreate,
    CourseUser,
    CourseUserCreate,
    CourseUserUpdate,
)
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import InsufficientRole
from golf_course_admin.services.course_user_service import CourseUserService

from fakes import MemoryCourseUserRepository, MemoryGolfCourseRepository

pytestmark = pytest.mark.asyncio


@pytest.fixture
def users() -> MemoryCourseUserRepository:
    return MemoryCourseUserRepository()


@pytest.fixture
def service(users, hasher) -> CourseUserService:
    courses = MemoryGolfCourseRepository()
    courses._insert({"name": "Pine Valley", "is_active": True})
    return CourseUserService(users, courses, hasher)


def member(users, username: str, role: str) -> CourseUser:
    return users._insert(
        {"golf_course_id": 1, "username": username, "password_hash": "", "role": role, "is_active": True}
    )


async def test_staff_cannot_change_peers_even_without_the_router(service, users) -> None:
    actor = member(users, "staff1", "STAFF")
    peer = member(users, "staff2", "STAFF")
    with pytest.raises(InsufficientRole):
        await service.create_for_course(actor, 1, CourseUserCreate(username="new", password="Password1!"))
    with pytest.raises(InsufficientRole):
        await service.update_for_course(actor, 1, peer.id, CourseUserUpdate(first_name="X"))
    with pytest.raises(InsufficientRole):
        await service.delete_for_course(actor, 1, peer.id)
    assert peer.id in users.docs


async def test_manager_passes_the_role_check_once(service, users) -> None:
    actor = member(users, "mgr", "MANAGER")
    created = await service.create_for_course(actor, 1, CourseUserCreate(username="new", password="Password1!"))
    assert created["role"] == "STAFF"
    await service.delete_for_course(actor, 1, created["id"])
    assert created["id"] not in users.docs


async def test_system_admin_skips_the_course_role_check(service, users) -> None:
    admin = SystemUser(id=1, name="admin1")
    body = AdminCourseUserCreate(username="boss", password="Password1!", golf_course_id=1, role="OWNER")
    created = await service.admin_create(admin, body)
    assert created["role"] == "OWNER"
