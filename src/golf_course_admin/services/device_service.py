from __future__ import annotations

from typing import Any

from golf_course_admin.configs.logging_config import audit, get_logger
from golf_course_admin.domain.entities.device import Device, DeviceFields
from golf_course_admin.domain.entities.golf_course import GolfCourse
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import ConflictError, NotFoundError
from golf_course_admin.repositories.device_repository import DEVICE_ID_TAKEN, DeviceRepository
from golf_course_admin.repositories.golf_course_repository import GolfCourseRepository

log = get_logger(__name__)

DEVICE_NOT_FOUND = "Device not found"


def device_view(device: Device, golf_course: dict[str, Any] | None) -> dict[str, Any]:
    data = device.public()
    data["golfCourse"] = golf_course
    return data


class DeviceService:
    """Admin-panel registry of course devices."""

    def __init__(self, devices: DeviceRepository, courses: GolfCourseRepository):
        self._devices = devices
        self._courses = courses

    async def _course(self, course_id: int) -> GolfCourse:
        course = await self._courses.find_by_id(course_id)
        if course is None:
            raise NotFoundError("Golf course not found")
        return course

    async def _ensure_device_id_free(self, device_id: str, exclude_id: int | None = None) -> None:
        existing = await self._devices.find_by_device_id(device_id)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(DEVICE_ID_TAKEN)

    async def list_devices(self) -> list[dict[str, Any]]:
        courses: dict[int, GolfCourse | None] = {}
        out = []
        for device in await self._devices.list_all():
            if device.golf_course_id not in courses:
                courses[device.golf_course_id] = await self._courses.find_by_id(device.golf_course_id)
            course = courses[device.golf_course_id]
            out.append(device_view(device, course.summary() if course else None))
        return out

    async def create_device(self, actor: SystemUser, body: DeviceFields) -> dict[str, Any]:
        await self._ensure_device_id_free(body.device_id)
        course = await self._course(body.golf_course_id)
        device = await self._devices.create(body.model_dump())
        audit(log, "device.created", actor.id, target=device.id, course_id=course.id)
        return device_view(device, course.summary())

    async def update_device(self, actor: SystemUser, record_id: int, body: DeviceFields) -> dict[str, Any]:
        existing = await self._devices.find_by_id(record_id)
        if existing is None:
            raise NotFoundError(DEVICE_NOT_FOUND)
        if body.device_id != existing.device_id:
            await self._ensure_device_id_free(body.device_id, exclude_id=record_id)
        course = await self._course(body.golf_course_id)

        device = await self._devices.update(record_id, body.model_dump())
        if device is None:
            raise NotFoundError(DEVICE_NOT_FOUND)
        audit(log, "device.updated", actor.id, target=record_id, course_id=course.id)
        return device_view(device, course.summary())

    async def delete_device(self, actor: SystemUser, record_id: int) -> None:
        if not await self._devices.delete(record_id):
            raise NotFoundError(DEVICE_NOT_FOUND)
        audit(log, "device.deleted", actor.id, target=record_id)
