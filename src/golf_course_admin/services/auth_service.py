from __future__ import annotations

from typing import Any

from golf_course_admin.auth.jwt import TokenService
from golf_course_admin.auth.passwords import PasswordHasher
from golf_course_admin.configs.logging_config import audit, get_logger, security_event
from golf_course_admin.domain.entities.course_user import CourseUser, ProfileUpdate
from golf_course_admin.errors import AuthError, NotFoundError, ValidationError
from golf_course_admin.repositories.course_user_repository import CourseUserRepository
from golf_course_admin.repositories.golf_course_repository import GolfCourseRepository
from golf_course_admin.repositories.system_user_repository import SystemUserRepository

log = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def course_user_view(user: CourseUser, golf_course: dict[str, Any] | None = None) -> dict[str, Any]:
    data = user.public()
    if golf_course is not None:
        data["golfCourse"] = golf_course
    return data


class AuthService:
    """Producers of tokens: the two login flows plus course self-service."""

    def __init__(
        self,
        *,
        system_users: SystemUserRepository,
        course_users: CourseUserRepository,
        golf_courses: GolfCourseRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self._system_users = system_users
        self._course_users = course_users
        self._golf_courses = golf_courses
        self._hasher = hasher
        self._tokens = tokens

    async def login_system(self, username: str, password: str) -> dict[str, Any]:
        user = await self._system_users.find_by_name(username)
        if user is None:
            security_event(log, "login.failed", typ="system", reason="unknown_user")
            raise AuthError(INVALID_CREDENTIALS)
        if not user.is_active:
            security_event(log, "login.failed", typ="system", reason="inactive", user_id=user.id)
            raise AuthError("Account is deactivated")
        if not await self._hasher.verify_async(password, user.password_hash):
            security_event(log, "login.failed", typ="system", reason="bad_password", user_id=user.id)
            raise AuthError(INVALID_CREDENTIALS)

        token = self._tokens.issue_system_token(user.id, user.name, user.role)
        log.info("login.success typ=system user_id=%s", user.id)
        return {"token": token, "user": user.summary()}

    async def login_course(self, golf_course_id: int, username: str, password: str) -> dict[str, Any]:
        course = await self._golf_courses.find_by_id(golf_course_id)
        if course is None:
            raise NotFoundError("Golf course not found")
        if not course.is_active:
            security_event(log, "login.failed", typ="course", reason="inactive_course", course_id=golf_course_id)
            raise AuthError("Golf course is inactive")

        user = await self._course_users.find_by_username(golf_course_id, username)
        if user is None:
            security_event(
                log, "login.failed", typ="course", reason="unknown_user", course_id=golf_course_id
            )
            raise AuthError(INVALID_CREDENTIALS)
        if not user.is_active:
            security_event(log, "login.failed", typ="course", reason="inactive", user_id=user.id)
            raise AuthError("Account is disabled")
        if not await self._hasher.verify_async(password, user.password_hash):
            security_event(log, "login.failed", typ="course", reason="bad_password", user_id=user.id)
            raise AuthError(INVALID_CREDENTIALS)

        # tenant binding recorded in the token for traceability only
        token = self._tokens.issue_course_token(
            user.id, user.username, f"{user.role}:{golf_course_id}"
        )
        log.info("login.success typ=course user_id=%s course_id=%s", user.id, golf_course_id)
        return {"token": token, "user": course_user_view(user, course.summary())}

    async def course_profile(self, user: CourseUser) -> dict[str, Any]:
        course = await self._golf_courses.find_by_id(user.golf_course_id)
        return course_user_view(user, course.summary() if course else None)

    async def update_course_profile(self, user: CourseUser, body: ProfileUpdate) -> dict[str, Any]:
        updates = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"password", "current_password"})
        if body.password:
            if not body.current_password:
                raise ValidationError("Current password is required to set a new password")
            if not await self._hasher.verify_async(body.current_password, user.password_hash):
                security_event(log, "profile.password_change_denied", user_id=user.id)
                raise ValidationError("Current password is incorrect")
            updates["password_hash"] = await self._hasher.hash_async(body.password)
        if not updates:
            return await self.course_profile(user)
        updated = await self._course_users.update(user.id, updates)
        if updated is None:
            raise NotFoundError("User not found")
        audit(log, "course_user.profile_updated", user.id, fields=sorted(updates.keys()))
        return await self.course_profile(updated)
