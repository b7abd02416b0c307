from __future__ import annotations

from datetime import datetime

from pydantic import Field

from golf_course_admin.domain.entities.base import CamelModel, Record


class Device(Record):
    """A check-in terminal registered to one golf course."""

    name: str
    device_id: str
    device_type: str = "android"
    golf_course_id: int
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeviceFields(CamelModel):
    """Body of device creation and update; updates replace every field."""

    name: str = Field(min_length=1, max_length=100)
    device_id: str = Field(min_length=1, max_length=100)
    device_type: str = Field(default="android", min_length=1, max_length=50)
    golf_course_id: int = Field(gt=0)
    is_active: bool = True
