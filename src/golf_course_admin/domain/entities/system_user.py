from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from golf_course_admin.auth.models import PrincipalKind
from golf_course_admin.domain.entities.base import CamelModel, Record


class SystemUser(Record):
    """Root-level admin account."""

    kind: ClassVar[PrincipalKind] = PrincipalKind.SYSTEM

    name: str
    email: str = ""
    role: str = "admin"
    is_active: bool = True
    password_hash: str = Field(default="", exclude=True)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}


class SystemUserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=8, max_length=100)
    email: str = Field(default="", max_length=255)
    role: str = Field(default="admin", min_length=1, max_length=50)
    is_active: bool = True


class SystemUserUpdate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    password: str | None = Field(default=None, min_length=8, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    role: str | None = Field(default=None, min_length=1, max_length=50)
    is_active: bool | None = None
