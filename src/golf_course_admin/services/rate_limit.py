from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from redis.exceptions import RedisError

from golf_course_admin.configs.logging_config import get_logger, security_event
from golf_course_admin.errors import RateLimitError
from golf_course_admin.utils.time_utils import now_ms

log = get_logger(__name__)


def client_ip(request: Request, *, trust_proxy_headers: bool = False) -> str:
    """
    Address the login throttle is keyed on.

    Forwarding headers are client controlled unless a proxy rewrites them, so
    they are read only when `trust_proxy_headers` is set.
    """
    if trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # may hold a proxy chain; the first entry is the client
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip
        cf_ip = request.headers.get("cf-connecting-ip")
        if cf_ip:
            return cf_ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_in: int


class LoginRateLimiter:
    """Fixed-window attempt counter per (scope, client ip) kept in Redis."""

    def __init__(
        self,
        redis_client,
        *,
        attempts: int,
        window_seconds: int,
        enabled: bool = True,
        trust_proxy_headers: bool = False,
    ):
        self._redis = redis_client
        self._attempts = attempts
        self._window = window_seconds
        self._enabled = enabled
        self._trust_proxy_headers = trust_proxy_headers

    @staticmethod
    def _key(scope: str, identifier: str) -> str:
        return f"rl:login:{scope}:{identifier}"

    async def hit(self, scope: str, identifier: str) -> RateLimitResult:
        key = self._key(scope, identifier)
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, self._window)
            ttl = self._window
        else:
            ttl = await self._redis.ttl(key)
            if ttl is None or ttl < 0:
                # key lost its expiry; restart the window
                await self._redis.expire(key, self._window)
                ttl = self._window
        return RateLimitResult(
            allowed=count <= self._attempts,
            limit=self._attempts,
            remaining=max(self._attempts - count, 0),
            reset_in=ttl,
        )

    async def check(self, scope: str, request: Request) -> None:
        if not self._enabled or self._redis is None:
            return
        ip = client_ip(request, trust_proxy_headers=self._trust_proxy_headers)
        try:
            result = await self.hit(scope, ip)
        except RedisError as exc:
            # throttling is best effort; authentication itself is unaffected
            log.warning("rate_limit.redis_unavailable scope=%s error=%s", scope, str(exc))
            return
        if not result.allowed:
            security_event(log, "login.rate_limited", scope=scope, client_ip=ip)
            raise RateLimitError(
                "Too many login attempts. Please try again later.",
                limit=result.limit,
                remaining=result.remaining,
                reset_at=now_ms() + result.reset_in * 1000,
                retry_after=result.reset_in,
            )
