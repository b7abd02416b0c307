from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from golf_course_admin.auth.models import PrincipalKind, Role
from golf_course_admin.domain.entities.base import CamelModel, Record


class CourseUser(Record):
    """Staff account scoped to exactly one golf course."""

    kind: ClassVar[PrincipalKind] = PrincipalKind.COURSE

    username: str
    golf_course_id: int
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    # kept as a plain string so a stray value in the store ranks 0 instead of failing to load
    role: str = Role.STAFF.value
    is_active: bool = True
    password_hash: str = Field(default="", exclude=True)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CourseUserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=8, max_length=100)
    email: str = Field(default="", max_length=255)
    first_name: str = Field(default="", max_length=50)
    last_name: str = Field(default="", max_length=50)
    role: Role = Role.STAFF
    is_active: bool = True


class CourseUserUpdate(CamelModel):
    username: str | None = Field(default=None, min_length=1, max_length=50)
    password: str | None = Field(default=None, min_length=8, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    role: Role | None = None
    is_active: bool | None = None


class AdminCourseUserCreate(CourseUserCreate):
    golf_course_id: int = Field(gt=0)


class AdminCourseUserUpdate(CourseUserUpdate):
    golf_course_id: int | None = Field(default=None, gt=0)


class ProfileUpdate(CamelModel):
    """Self-service changes; role and active flag are not editable here."""

    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    password: str | None = Field(default=None, min_length=8, max_length=100)
    # required whenever `password` is set
    current_password: str | None = Field(default=None, max_length=100)
