from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from golf_course_admin.configs.settings import Settings
from golf_course_admin.configs.logging_config import get_logger
log = get_logger(__name__)

COUNTERS_COLLECTION = "counters"


def get_mongo_client(settings: Settings) -> AsyncIOMotorClient:
    log.info("mongo.client.create uri=%s", settings.mongo_uri)
    return AsyncIOMotorClient(settings.mongo_uri)


def get_mongo_db(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    log.info("mongo.db.select db=%s", settings.mongo_db)
    return client[settings.mongo_db]


async def next_sequence(db: AsyncIOMotorDatabase, name: str) -> int:
    """Allocate the next integer id for `name` with an atomic upsert."""
    doc = await db[COUNTERS_COLLECTION].find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(doc["seq"])
