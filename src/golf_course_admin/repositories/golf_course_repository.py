from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from golf_course_admin.configs.settings import Settings
from golf_course_admin.domain.entities.golf_course import GolfCourse
from golf_course_admin.configs.logging_config import get_logger
from golf_course_admin.repositories.mongo import next_sequence
from golf_course_admin.utils.time_utils import utc_now

log = get_logger(__name__)


class GolfCourseRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db["golf_courses"]

    async def find_by_id(self, course_id: int) -> GolfCourse | None:
        log.debug("repo.golf_course.find_by_id id=%s", course_id)
        return GolfCourse.from_doc(await self._col.find_one({"_id": course_id}))

    async def list_all(self) -> list[GolfCourse]:
        cursor = self._col.find({}).sort([("created_at", -1)])
        return [GolfCourse.from_doc(doc) async for doc in cursor]

    async def create(self, fields: dict[str, Any]) -> GolfCourse:
        now = utc_now()
        doc = {
            "_id": await next_sequence(self._db, "golf_courses"),
            "is_active": True,
            **fields,
            "created_at": now,
            "updated_at": now,
        }
        log.info("repo.golf_course.insert id=%s name=%s", doc["_id"], doc.get("name"))
        await self._col.insert_one(doc)
        return GolfCourse.from_doc(doc)

    async def update(self, course_id: int, updates: dict[str, Any]) -> GolfCourse | None:
        log.info("repo.golf_course.update id=%s keys=%s", course_id, sorted(updates.keys()))
        doc = await self._col.find_one_and_update(
            {"_id": course_id},
            {"$set": {**updates, "updated_at": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        return GolfCourse.from_doc(doc)

    async def delete(self, course_id: int) -> bool:
        log.info("repo.golf_course.delete id=%s", course_id)
        res = await self._col.delete_one({"_id": course_id})
        return res.deleted_count == 1
