from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from golf_course_admin.auth.dependencies import get_system_principal
from golf_course_admin.domain.entities.course_user import AdminCourseUserCreate, AdminCourseUserUpdate
from golf_course_admin.domain.entities.device import DeviceFields
from golf_course_admin.domain.entities.golf_course import GolfCourseAdminUpdate, GolfCourseFields
from golf_course_admin.domain.entities.system_user import (
    SystemUser,
    SystemUserCreate,
    SystemUserUpdate,
)
from golf_course_admin.errors import ValidationError
from golf_course_admin.services.course_user_service import CourseUserService
from golf_course_admin.services.device_service import DeviceService
from golf_course_admin.services.golf_course_service import GolfCourseService
from golf_course_admin.services.system_user_service import SystemUserService
from golf_course_admin.utils.response import success
from golf_course_admin.configs.logging_config import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _system_users(request: Request) -> SystemUserService:
    return request.app.state.system_user_service


def _courses(request: Request) -> GolfCourseService:
    return request.app.state.golf_course_service


def _course_users(request: Request) -> CourseUserService:
    return request.app.state.course_user_service


def _devices(request: Request) -> DeviceService:
    return request.app.state.device_service


# ----------------------------
# System users
# ----------------------------


@router.get("/users")
async def list_system_users(request: Request, _: SystemUser = Depends(get_system_principal)) -> dict:
    return success({"users": await _system_users(request).list_users()})


@router.post("/users")
async def create_system_user(
    request: Request,
    body: SystemUserCreate,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    log.info("admin.system_user.create actor=%s name=%s", actor.id, body.name)
    return success({"user": await _system_users(request).create_user(actor, body)})


@router.put("/users/{user_id}")
async def update_system_user(
    request: Request,
    user_id: int,
    body: SystemUserUpdate,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    log.info("admin.system_user.update actor=%s target=%s", actor.id, user_id)
    return success({"user": await _system_users(request).update_user(actor, user_id, body)})


@router.delete("/users/{user_id}")
async def delete_system_user(
    request: Request,
    user_id: int,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    log.info("admin.system_user.delete actor=%s target=%s", actor.id, user_id)
    await _system_users(request).delete_user(actor, user_id)
    return success(message="User deleted successfully")


# ----------------------------
# Golf courses
# ----------------------------


@router.get("/golf-courses")
async def list_golf_courses(request: Request, _: SystemUser = Depends(get_system_principal)) -> dict:
    return success({"golfCourses": await _courses(request).list_courses()})


@router.post("/golf-courses")
async def create_golf_course(
    request: Request,
    body: GolfCourseFields,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    return success({"golfCourse": await _courses(request).create_course(actor, body)})


@router.get("/golf-courses/{course_id}")
async def get_golf_course(
    request: Request,
    course_id: int,
    _: SystemUser = Depends(get_system_principal),
) -> dict:
    return success({"golfCourse": await _courses(request).course_details(course_id)})


@router.put("/golf-courses/{course_id}")
async def update_golf_course(
    request: Request,
    course_id: int,
    body: GolfCourseAdminUpdate,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    return success({"golfCourse": await _courses(request).update_course(actor, course_id, body)})


@router.delete("/golf-courses/{course_id}")
async def delete_golf_course(
    request: Request,
    course_id: int,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    await _courses(request).delete_course(actor, course_id)
    return success(message="Golf course deleted successfully")


# ----------------------------
# Golf-course users, across all courses
# ----------------------------


@router.get("/golf-course-users")
async def list_golf_course_users(
    request: Request,
    golf_course_id: Optional[str] = Query(default=None, alias="golfCourseId"),
    search: Optional[str] = Query(default=None, max_length=100),
    _: SystemUser = Depends(get_system_principal),
) -> dict:
    course_filter = None
    if golf_course_id and golf_course_id != "all":
        try:
            course_filter = int(golf_course_id)
        except ValueError:
            raise ValidationError("Invalid golf course ID")
    users = await _course_users(request).list_all(golf_course_id=course_filter, search=search)
    return success({"users": users})


@router.post("/golf-course-users")
async def create_golf_course_user(
    request: Request,
    body: AdminCourseUserCreate,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    return success({"user": await _course_users(request).admin_create(actor, body)})


@router.put("/golf-course-users/{user_id}")
async def update_golf_course_user(
    request: Request,
    user_id: int,
    body: AdminCourseUserUpdate,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    return success({"user": await _course_users(request).admin_update(actor, user_id, body)})


@router.delete("/golf-course-users/{user_id}")
async def delete_golf_course_user(
    request: Request,
    user_id: int,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    await _course_users(request).admin_delete(actor, user_id)
    return success(message="User deleted successfully")


# ----------------------------
# Devices
# ----------------------------


@router.get("/devices")
async def list_devices(request: Request, _: SystemUser = Depends(get_system_principal)) -> dict:
    return success({"devices": await _devices(request).list_devices()})


@router.post("/devices")
async def create_device(
    request: Request,
    body: DeviceFields,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    log.info("admin.device.create actor=%s device_id=%s", actor.id, body.device_id)
    return success({"device": await _devices(request).create_device(actor, body)})


@router.put("/devices/{device_id}")
async def update_device(
    request: Request,
    device_id: int,
    body: DeviceFields,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    return success({"device": await _devices(request).update_device(actor, device_id, body)})


@router.delete("/devices/{device_id}")
async def delete_device(
    request: Request,
    device_id: int,
    actor: SystemUser = Depends(get_system_principal),
) -> dict:
    await _devices(request).delete_device(actor, device_id)
    return success(message="Device deleted successfully")
