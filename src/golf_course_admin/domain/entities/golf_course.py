from __future__ import annotations

from datetime import datetime

from pydantic import Field

from golf_course_admin.domain.entities.base import CamelModel, Record


class GolfCourse(Record):
    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    phone: str = ""
    website: str = ""
    tax_rate: float = 0.06
    discount_rate: float = 0.1
    lead_discount_rate: float = 0.3
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name}


class GolfCourseFields(CamelModel):
    """Body of course creation and of settings updates."""

    name: str = Field(min_length=1, max_length=100)
    address: str = Field(default="", max_length=255)
    city: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=50)
    zip: str = Field(default="", max_length=10)
    phone: str = Field(default="", max_length=20)
    website: str = Field(default="", max_length=255)
    tax_rate: float = Field(default=0.06, ge=0, le=1)
    discount_rate: float = Field(default=0.1, ge=0, le=1)
    lead_discount_rate: float = Field(default=0.3, ge=0, le=1)


class GolfCourseAdminUpdate(GolfCourseFields):
    is_active: bool | None = None
