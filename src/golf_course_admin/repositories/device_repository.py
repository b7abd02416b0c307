from __future__ import annotations

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from golf_course_admin.configs.logging_config import get_logger
from golf_course_admin.configs.settings import Settings
from golf_course_admin.domain.entities.device import Device
from golf_course_admin.errors import ConflictError
from golf_course_admin.repositories.mongo import next_sequence
from golf_course_admin.utils.time_utils import utc_now

log = get_logger(__name__)

DEVICE_ID_TAKEN = "Device with this ID already exists"


class DeviceRepository:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Settings):
        self._db = db
        self._settings = settings
        self._col = db["devices"]

    async def ensure_indexes(self) -> None:
        log.info("repo.device.ensure_indexes start")
        # the hardware id is unique across all courses
        await self._col.create_index([("device_id", 1)], unique=True)
        await self._col.create_index([("golf_course_id", 1)])
        log.info("repo.device.ensure_indexes done")

    async def find_by_id(self, record_id: int) -> Device | None:
        return Device.from_doc(await self._col.find_one({"_id": record_id}))

    async def find_by_device_id(self, device_id: str) -> Device | None:
        return Device.from_doc(await self._col.find_one({"device_id": device_id}))

    async def list_all(self) -> list[Device]:
        cursor = self._col.find({}).sort([("created_at", -1)])
        return [Device.from_doc(doc) async for doc in cursor]

    async def create(self, fields: dict[str, Any]) -> Device:
        now = utc_now()
        doc = {
            "_id": await next_sequence(self._db, "devices"),
            **fields,
            "created_at": now,
            "updated_at": now,
        }
        log.info(
            "repo.device.insert id=%s device_id=%s course_id=%s",
            doc["_id"],
            doc.get("device_id"),
            doc.get("golf_course_id"),
        )
        try:
            await self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ConflictError(DEVICE_ID_TAKEN) from exc
        return Device.from_doc(doc)

    async def update(self, record_id: int, updates: dict[str, Any]) -> Device | None:
        log.info("repo.device.update id=%s keys=%s", record_id, sorted(updates.keys()))
        try:
            doc = await self._col.find_one_and_update(
                {"_id": record_id},
                {"$set": {**updates, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise ConflictError(DEVICE_ID_TAKEN) from exc
        return Device.from_doc(doc)

    async def delete(self, record_id: int) -> bool:
        log.info("repo.device.delete id=%s", record_id)
        res = await self._col.delete_one({"_id": record_id})
        return res.deleted_count == 1

    async def delete_for_course(self, golf_course_id: int) -> int:
        res = await self._col.delete_many({"golf_course_id": golf_course_id})
        log.info("repo.device.delete_for_course course_id=%s deleted=%s", golf_course_id, res.deleted_count)
        return res.deleted_count

    async def count_for_course(self, golf_course_id: int) -> int:
        return await self._col.count_documents({"golf_course_id": golf_course_id})
