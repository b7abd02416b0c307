from __future__ import annotations

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext

from golf_course_admin.configs.logging_config import get_logger

log = get_logger(__name__)

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """
    bcrypt hashing with a fixed cost factor.

    bcrypt at cost 12 takes tens of milliseconds of CPU, so request handlers
    use the ``*_async`` variants which run in the threadpool.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self._ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plaintext: str) -> str:
        return self._ctx.hash(plaintext)

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        if not hashed:
            return False
        try:
            return self._ctx.verify(plaintext, hashed)
        except (ValueError, TypeError) as exc:
            # unknown or malformed hash; treated as a mismatch
            log.warning("password.verify_unreadable_hash error=%s", type(exc).__name__)
            return False

    async def hash_async(self, plaintext: str) -> str:
        return await run_in_threadpool(self.hash, plaintext)

    async def verify_async(self, plaintext: str, hashed: str | None) -> bool:
        return await run_in_threadpool(self.verify, plaintext, hashed)
