from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from golf_course_admin.auth.dependencies import get_course_principal, require_course_role
from golf_course_admin.auth.models import Role
from golf_course_admin.domain.entities.auth import LoginRequest
from golf_course_admin.domain.entities.course_user import (
    CourseUser,
    CourseUserCreate,
    CourseUserUpdate,
    ProfileUpdate,
)
from golf_course_admin.domain.entities.golf_course import GolfCourseFields
from golf_course_admin.services.auth_service import AuthService
from golf_course_admin.services.course_user_service import CourseUserService
from golf_course_admin.services.golf_course_service import GolfCourseService
from golf_course_admin.services.rate_limit import LoginRateLimiter
from golf_course_admin.utils.response import success
from golf_course_admin.configs.logging_config import get_logger

log = get_logger(__name__)

# Every route below authenticates through get_course_principal, which checks
# the token's owner against {course_id}.
router = APIRouter(prefix="/api/golf-course/{course_id}", tags=["golf-course"])


def _auth(request: Request) -> AuthService:
    return request.app.state.auth_service


def _courses(request: Request) -> GolfCourseService:
    return request.app.state.golf_course_service


def _users(request: Request) -> CourseUserService:
    return request.app.state.course_user_service


# ----------------------------
# Auth
# ----------------------------


@router.post("/auth/login")
async def login(request: Request, course_id: int, body: LoginRequest) -> dict:
    limiter: LoginRateLimiter = request.app.state.login_rate_limiter
    await limiter.check("course", request)
    username, password = body.credentials()
    log.info("auth.login.start typ=course course_id=%s username=%s", course_id, username)
    data = await _auth(request).login_course(course_id, username, password)
    return success(data)


@router.post("/auth/logout")
async def logout(course_id: int, principal: CourseUser = Depends(get_course_principal)) -> dict:
    # stateless tokens: nothing to revoke server side
    log.info("auth.logout typ=course user_id=%s course_id=%s", principal.id, course_id)
    return success(
        {"user": {"id": principal.id, "username": principal.username, "golfCourseId": course_id}},
        message="Logged out successfully",
    )


@router.get("/auth/profile")
async def get_profile(request: Request, principal: CourseUser = Depends(get_course_principal)) -> dict:
    return success({"user": await _auth(request).course_profile(principal)})


@router.put("/auth/profile")
async def update_profile(
    request: Request,
    body: ProfileUpdate,
    principal: CourseUser = Depends(get_course_principal),
) -> dict:
    return success({"user": await _auth(request).update_course_profile(principal, body)})


# ----------------------------
# Settings
# ----------------------------


@router.get("/settings")
async def get_settings(
    request: Request,
    course_id: int,
    _: CourseUser = Depends(get_course_principal),
) -> dict:
    return success({"golfCourse": await _courses(request).course_details(course_id)})


@router.put("/settings")
async def update_settings(
    request: Request,
    body: GolfCourseFields,
    principal: CourseUser = Depends(require_course_role(Role.MANAGER)),
) -> dict:
    return success({"golfCourse": await _courses(request).update_settings(principal, body)})


# ----------------------------
# Staff
# ----------------------------


@router.get("/users")
async def list_users(
    request: Request,
    course_id: int,
    _: CourseUser = Depends(get_course_principal),
) -> dict:
    return success(await _users(request).list_for_course(course_id))


@router.get("/users/{user_id}")
async def get_user(
    request: Request,
    course_id: int,
    user_id: int,
    _: CourseUser = Depends(get_course_principal),
) -> dict:
    return success({"user": await _users(request).get_for_course(course_id, user_id)})


@router.post("/users")
async def create_user(
    request: Request,
    course_id: int,
    body: CourseUserCreate,
    principal: CourseUser = Depends(require_course_role(Role.MANAGER)),
) -> dict:
    return success({"user": await _users(request).create_for_course(principal, course_id, body)})


@router.put("/users/{user_id}")
async def update_user(
    request: Request,
    course_id: int,
    user_id: int,
    body: CourseUserUpdate,
    principal: CourseUser = Depends(require_course_role(Role.MANAGER)),
) -> dict:
    return success({"user": await _users(request).update_for_course(principal, course_id, user_id, body)})


@router.delete("/users/{user_id}")
async def delete_user(
    request: Request,
    course_id: int,
    user_id: int,
    principal: CourseUser = Depends(require_course_role(Role.MANAGER)),
) -> dict:
    await _users(request).delete_for_course(principal, course_id, user_id)
    return success(message="User deleted successfully")
