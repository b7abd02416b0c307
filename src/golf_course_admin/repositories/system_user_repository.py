from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from golf_course_admin.configs.settings import Settings
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import ConflictError
from golf_course_admin.configs.logging_config import get_logger
from golf_course_admin.repositories.mongo import next_sequence
from golf_course_admin.utils.time_utils import utc_now

log = get_logger(__name__)

NAME_TAKEN = "User with this name already exists"


class SystemUserRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db["system_users"]

    async def ensure_indexes(self) -> None:
        log.info("repo.system_user.ensure_indexes start")
        await self._col.create_index([("name", 1)], unique=True)
        log.info("repo.system_user.ensure_indexes done")

    async def find_by_id(self, user_id: int) -> SystemUser | None:
        log.debug("repo.system_user.find_by_id id=%s", user_id)
        return SystemUser.from_doc(await self._col.find_one({"_id": user_id}))

    async def find_by_name(self, name: str) -> SystemUser | None:
        log.debug("repo.system_user.find_by_name name=%s", name)
        return SystemUser.from_doc(await self._col.find_one({"name": name}))

    async def list_all(self) -> list[SystemUser]:
        cursor = self._col.find({}).sort([("created_at", -1)])
        return [SystemUser.from_doc(doc) async for doc in cursor]

    async def count(self) -> int:
        return await self._col.count_documents({})

    async def create(
        self,
        *,
        name: str,
        password_hash: str,
        email: str = "",
        role: str = "admin",
        is_active: bool = True,
    ) -> SystemUser:
        now = utc_now()
        doc: dict[str, Any] = {
            "_id": await next_sequence(self._db, "system_users"),
            "name": name,
            "email": email,
            "role": role,
            "is_active": is_active,
            "password_hash": password_hash,
            "created_at": now,
            "updated_at": now,
        }
        log.info("repo.system_user.insert id=%s name=%s", doc["_id"], name)
        try:
            await self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ConflictError(NAME_TAKEN) from exc
        return SystemUser.from_doc(doc)

    async def update(self, user_id: int, updates: dict[str, Any]) -> SystemUser | None:
        log.info("repo.system_user.update id=%s keys=%s", user_id, sorted(updates.keys()))
        try:
            doc = await self._col.find_one_and_update(
                {"_id": user_id},
                {"$set": {**updates, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise ConflictError(NAME_TAKEN) from exc
        return SystemUser.from_doc(doc)

    async def delete(self, user_id: int) -> bool:
        log.info("repo.system_user.delete id=%s", user_id)
        res = await self._col.delete_one({"_id": user_id})
        return res.deleted_count == 1
