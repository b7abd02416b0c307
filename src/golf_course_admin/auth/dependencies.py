from __future__ import annotations

from fastapi import Depends, Header, Request

from golf_course_admin.auth.models import Role
from golf_course_admin.auth.resolver import CourseAuthResolver, SystemAuthResolver
from golf_course_admin.auth.roles import require_at_least
from golf_course_admin.domain.entities.course_user import CourseUser
from golf_course_admin.domain.entities.system_user import SystemUser


async def get_system_principal(
    request: Request,
    authorization: str | None = Header(default=None),
) -> SystemUser:
    """Authenticated, currently active system admin."""
    resolver: SystemAuthResolver = request.app.state.system_resolver
    return await resolver.resolve(authorization)


async def get_course_principal(
    request: Request,
    course_id: int,
    authorization: str | None = Header(default=None),
) -> CourseUser:
    """
    Authenticated, currently active staff member of the course named by the
    `{course_id}` path segment. Every course-scoped route depends on this.
    """
    resolver: CourseAuthResolver = request.app.state.course_resolver
    return await resolver.resolve(authorization, expected_course_id=course_id)


def require_course_role(required: Role):
    async def dependency(principal: CourseUser = Depends(get_course_principal)) -> CourseUser:
        require_at_least(principal, required)
        return principal

    return dependency
