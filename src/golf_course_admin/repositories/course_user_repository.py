from __future__ import annotations

import re
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from golf_course_admin.configs.settings import Settings
from golf_course_admin.domain.entities.course_user import CourseUser
from golf_course_admin.errors import ConflictError
from golf_course_admin.configs.logging_config import get_logger
from golf_course_admin.repositories.mongo import next_sequence
from golf_course_admin.utils.time_utils import utc_now

log = get_logger(__name__)

USERNAME_TAKEN = "Username already exists for this golf course"

SEARCH_FIELDS = ("username", "email", "first_name", "last_name")


def build_user_query(golf_course_id: int | None = None, search: str | None = None) -> dict[str, Any]:
    q: dict[str, Any] = {}
    if golf_course_id is not None:
        q["golf_course_id"] = golf_course_id
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        q["$or"] = [{field: pattern} for field in SEARCH_FIELDS]
    return q


class CourseUserRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db["golf_course_users"]

    async def ensure_indexes(self) -> None:
        log.info("repo.course_user.ensure_indexes start")
        # usernames are unique within a course, not globally
        await self._col.create_index([("golf_course_id", 1), ("username", 1)], unique=True)
        log.info("repo.course_user.ensure_indexes done")

    async def find_by_id(self, user_id: int) -> CourseUser | None:
        log.debug("repo.course_user.find_by_id id=%s", user_id)
        return CourseUser.from_doc(await self._col.find_one({"_id": user_id}))

    async def find_by_username(self, golf_course_id: int, username: str) -> CourseUser | None:
        log.debug("repo.course_user.find_by_username course_id=%s username=%s", golf_course_id, username)
        return CourseUser.from_doc(
            await self._col.find_one({"golf_course_id": golf_course_id, "username": username})
        )

    async def list(
        self, *, golf_course_id: int | None = None, search: str | None = None
    ) -> list[CourseUser]:
        q = build_user_query(golf_course_id, search)
        log.info("repo.course_user.list course_id=%s query_keys=%s", golf_course_id, sorted(q.keys()))
        cursor = self._col.find(q).sort([("golf_course_id", 1), ("username", 1)])
        return [CourseUser.from_doc(doc) async for doc in cursor]

    async def create(self, *, golf_course_id: int, username: str, password_hash: str, **fields: Any) -> CourseUser:
        now = utc_now()
        doc: dict[str, Any] = {
            "_id": await next_sequence(self._db, "golf_course_users"),
            "golf_course_id": golf_course_id,
            "username": username,
            "password_hash": password_hash,
            "email": "",
            "first_name": "",
            "last_name": "",
            "role": "STAFF",
            "is_active": True,
            **fields,
            "created_at": now,
            "updated_at": now,
        }
        log.info("repo.course_user.insert id=%s course_id=%s username=%s", doc["_id"], golf_course_id, username)
        try:
            await self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ConflictError(USERNAME_TAKEN) from exc
        return CourseUser.from_doc(doc)

    async def update(self, user_id: int, updates: dict[str, Any]) -> CourseUser | None:
        log.info("repo.course_user.update id=%s keys=%s", user_id, sorted(updates.keys()))
        try:
            doc = await self._col.find_one_and_update(
                {"_id": user_id},
                {"$set": {**updates, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise ConflictError(USERNAME_TAKEN) from exc
        return CourseUser.from_doc(doc)

    async def delete(self, user_id: int) -> bool:
        log.info("repo.course_user.delete id=%s", user_id)
        res = await self._col.delete_one({"_id": user_id})
        return res.deleted_count == 1

    async def delete_for_course(self, golf_course_id: int) -> int:
        res = await self._col.delete_many({"golf_course_id": golf_course_id})
        log.info("repo.course_user.delete_for_course course_id=%s deleted=%s", golf_course_id, res.deleted_count)
        return res.deleted_count

    async def count_for_course(self, golf_course_id: int) -> int:
        return await self._col.count_documents({"golf_course_id": golf_course_id})
