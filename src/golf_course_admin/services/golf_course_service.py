from __future__ import annotations

from typing import Any

from golf_course_admin.auth.models import Role
from golf_course_admin.auth.roles import require_at_least
from golf_course_admin.configs.logging_config import audit, get_logger
from golf_course_admin.domain.entities.course_user import CourseUser
from golf_course_admin.domain.entities.golf_course import (
    GolfCourse,
    GolfCourseAdminUpdate,
    GolfCourseFields,
)
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import NotFoundError
from golf_course_admin.repositories.course_user_repository import CourseUserRepository
from golf_course_admin.repositories.device_repository import DeviceRepository
from golf_course_admin.repositories.golf_course_repository import GolfCourseRepository

log = get_logger(__name__)

COURSE_NOT_FOUND = "Golf course not found"


class GolfCourseService:
    def __init__(
        self,
        courses: GolfCourseRepository,
        course_users: CourseUserRepository,
        devices: DeviceRepository,
    ):
        self._courses = courses
        self._course_users = course_users
        self._devices = devices

    async def get(self, course_id: int) -> GolfCourse:
        course = await self._courses.find_by_id(course_id)
        if course is None:
            raise NotFoundError(COURSE_NOT_FOUND)
        return course

    async def _with_counts(self, course: GolfCourse) -> dict[str, Any]:
        data = course.public()
        data["userCount"] = await self._course_users.count_for_course(course.id)
        data["deviceCount"] = await self._devices.count_for_course(course.id)
        return data

    # -- system admin panel --

    async def list_courses(self) -> list[dict[str, Any]]:
        return [await self._with_counts(c) for c in await self._courses.list_all()]

    async def create_course(self, actor: SystemUser, body: GolfCourseFields) -> dict[str, Any]:
        course = await self._courses.create(body.model_dump())
        audit(log, "golf_course.created", actor.id, target=course.id)
        return await self._with_counts(course)

    async def update_course(self, actor: SystemUser, course_id: int, body: GolfCourseAdminUpdate) -> dict[str, Any]:
        await self.get(course_id)
        course = await self._courses.update(course_id, body.model_dump(exclude_none=True))
        if course is None:
            raise NotFoundError(COURSE_NOT_FOUND)
        audit(log, "golf_course.updated", actor.id, target=course_id)
        return await self._with_counts(course)

    async def delete_course(self, actor: SystemUser, course_id: int) -> None:
        await self.get(course_id)
        removed_users = await self._course_users.delete_for_course(course_id)
        removed_devices = await self._devices.delete_for_course(course_id)
        if not await self._courses.delete(course_id):
            raise NotFoundError(COURSE_NOT_FOUND)
        audit(
            log,
            "golf_course.deleted",
            actor.id,
            target=course_id,
            removed_users=removed_users,
            removed_devices=removed_devices,
        )

    async def course_details(self, course_id: int) -> dict[str, Any]:
        return await self._with_counts(await self.get(course_id))

    # -- course-scoped settings --

    async def update_settings(self, actor: CourseUser, body: GolfCourseFields) -> dict[str, Any]:
        require_at_least(actor, Role.MANAGER)
        course_id = actor.golf_course_id
        await self.get(course_id)
        course = await self._courses.update(course_id, body.model_dump())
        if course is None:
            raise NotFoundError(COURSE_NOT_FOUND)
        audit(log, "golf_course.settings_updated", actor.id, course_id=course_id)
        return await self._with_counts(course)
