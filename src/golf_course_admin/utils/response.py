from __future__ import annotations

from typing import Any

from golf_course_admin.utils.time_utils import now_ms


def success(data: dict[str, Any] | None = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(data or {})
    body["timestamp"] = now_ms()
    return body


def failure(message: str) -> dict[str, Any]:
    return {"success": False, "error": message, "timestamp": now_ms()}
