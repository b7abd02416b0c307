from __future__ import annotations

from typing import Any, Union

from golf_course_admin.auth.models import PrincipalKind, Role
from golf_course_admin.auth.passwords import PasswordHasher
from golf_course_admin.auth.roles import ensure_can_assign, ensure_can_manage, require_at_least
from golf_course_admin.configs.logging_config import audit, get_logger
from golf_course_admin.domain.entities.course_user import (
    AdminCourseUserCreate,
    AdminCourseUserUpdate,
    CourseUser,
    CourseUserCreate,
    CourseUserUpdate,
)
from golf_course_admin.domain.entities.golf_course import GolfCourse
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import ConflictError, NotFoundError
from golf_course_admin.repositories.course_user_repository import USERNAME_TAKEN, CourseUserRepository
from golf_course_admin.repositories.golf_course_repository import GolfCourseRepository
from golf_course_admin.services.auth_service import course_user_view

log = get_logger(__name__)

Actor = Union[SystemUser, CourseUser]

USER_NOT_FOUND = "User not found"


def _authorize_staff_change(actor: Actor) -> None:
    # staff management needs MANAGER or OWNER; system admins always pass
    if actor.kind == PrincipalKind.COURSE:
        require_at_least(actor, Role.MANAGER)


class CourseUserService:
    """
    Golf-course staff accounts.

    Two entry points share the same rules: the course's own managers working
    under /api/golf-course/{courseId}/users, and system admins working from
    the admin panel across all courses.
    """

    def __init__(self, users: CourseUserRepository, courses: GolfCourseRepository, hasher: PasswordHasher):
        self._users = users
        self._courses = courses
        self._hasher = hasher

    async def _course(self, course_id: int) -> GolfCourse:
        course = await self._courses.find_by_id(course_id)
        if course is None:
            raise NotFoundError("Golf course not found")
        return course

    async def _user_in_course(self, course_id: int, user_id: int) -> CourseUser:
        user = await self._users.find_by_id(user_id)
        if user is None or user.golf_course_id != course_id:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def _ensure_username_free(self, course_id: int, username: str, exclude_id: int | None = None) -> None:
        existing = await self._users.find_by_username(course_id, username)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(USERNAME_TAKEN)

    # -- shared operations --

    async def _create(self, actor: Actor, course: GolfCourse, body: CourseUserCreate) -> dict[str, Any]:
        _authorize_staff_change(actor)
        ensure_can_assign(actor, body.role)
        await self._ensure_username_free(course.id, body.username)

        user = await self._users.create(
            golf_course_id=course.id,
            username=body.username,
            password_hash=await self._hasher.hash_async(body.password),
            email=body.email,
            first_name=body.first_name,
            last_name=body.last_name,
            role=body.role.value,
            is_active=body.is_active,
        )
        audit(
            log,
            "course_user.created",
            actor.id,
            actor_type=actor.kind.value,
            target=user.id,
            course_id=course.id,
            role=user.role,
        )
        return course_user_view(user, course.summary())

    async def _update(
        self,
        actor: Actor,
        target: CourseUser,
        body: CourseUserUpdate,
        course: GolfCourse,
    ) -> dict[str, Any]:
        _authorize_staff_change(actor)
        ensure_can_manage(actor, target)
        if body.role is not None:
            ensure_can_assign(actor, body.role)

        username = body.username or target.username
        if course.id != target.golf_course_id or username != target.username:
            await self._ensure_username_free(course.id, username, exclude_id=target.id)

        updates = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})
        if body.role is not None:
            updates["role"] = body.role.value
        if body.password:
            updates["password_hash"] = await self._hasher.hash_async(body.password)

        user = await self._users.update(target.id, updates)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        audit(
            log,
            "course_user.updated",
            actor.id,
            actor_type=actor.kind.value,
            target=target.id,
            fields=sorted(updates.keys()),
        )
        return course_user_view(user, course.summary())

    async def _delete(self, actor: Actor, target: CourseUser) -> None:
        _authorize_staff_change(actor)
        ensure_can_manage(actor, target)
        if not await self._users.delete(target.id):
            raise NotFoundError(USER_NOT_FOUND)
        audit(log, "course_user.deleted", actor.id, actor_type=actor.kind.value, target=target.id)

    # -- course-scoped --

    async def list_for_course(self, course_id: int) -> dict[str, Any]:
        course = await self._course(course_id)
        users = await self._users.list(golf_course_id=course_id)
        return {"users": [u.public() for u in users], "golfCourse": course.summary()}

    async def get_for_course(self, course_id: int, user_id: int) -> dict[str, Any]:
        course = await self._course(course_id)
        user = await self._user_in_course(course_id, user_id)
        return course_user_view(user, course.summary())

    async def create_for_course(self, actor: CourseUser, course_id: int, body: CourseUserCreate) -> dict[str, Any]:
        return await self._create(actor, await self._course(course_id), body)

    async def update_for_course(
        self, actor: CourseUser, course_id: int, user_id: int, body: CourseUserUpdate
    ) -> dict[str, Any]:
        course = await self._course(course_id)
        target = await self._user_in_course(course_id, user_id)
        return await self._update(actor, target, body, course)

    async def delete_for_course(self, actor: CourseUser, course_id: int, user_id: int) -> None:
        target = await self._user_in_course(course_id, user_id)
        await self._delete(actor, target)

    # -- system admin panel --

    async def list_all(self, *, golf_course_id: int | None = None, search: str | None = None) -> list[dict[str, Any]]:
        users = await self._users.list(golf_course_id=golf_course_id, search=search)
        courses: dict[int, GolfCourse | None] = {}
        out = []
        for user in users:
            if user.golf_course_id not in courses:
                courses[user.golf_course_id] = await self._courses.find_by_id(user.golf_course_id)
            course = courses[user.golf_course_id]
            out.append(course_user_view(user, course.summary() if course else None))
        return out

    async def admin_create(self, actor: SystemUser, body: AdminCourseUserCreate) -> dict[str, Any]:
        return await self._create(actor, await self._course(body.golf_course_id), body)

    async def admin_update(self, actor: SystemUser, user_id: int, body: AdminCourseUserUpdate) -> dict[str, Any]:
        target = await self._users.find_by_id(user_id)
        if target is None:
            raise NotFoundError(USER_NOT_FOUND)
        course = await self._course(body.golf_course_id or target.golf_course_id)
        return await self._update(actor, target, body, course)

    async def admin_delete(self, actor: SystemUser, user_id: int) -> None:
        target = await self._users.find_by_id(user_id)
        if target is None:
            raise NotFoundError(USER_NOT_FOUND)
        await self._delete(actor, target)
