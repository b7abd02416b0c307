import redis.asyncio as redis
from redis.exceptions import RedisError

from golf_course_admin.configs.settings import get_settings
from golf_course_admin.configs.logging_config import get_logger

log = get_logger(__name__)


class RedisClient:
    """
    Simple Redis client wrapper. Holds the connection used for login throttling.
    """

    client: redis.Redis = None

    async def connect(self, url: str | None = None) -> None:
        url = url or get_settings().redis_url
        try:
            log.info(f"Connecting to Redis at {url}")
            self.client = redis.from_url(url, decode_responses=True)
            await self.client.ping()
            log.info("Connected to Redis")
        except Exception as e:
            log.error(f"Error connecting to Redis: {e}")
            raise

    async def connect_optional(self, url: str | None = None) -> redis.Redis | None:
        """Connect, or return None so the service starts without throttling."""
        try:
            await self.connect(url)
        except RedisError:
            log.warning("redis.unavailable login throttling disabled until restart")
            await self.close()
        return self.client

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None


redis_client = RedisClient()
