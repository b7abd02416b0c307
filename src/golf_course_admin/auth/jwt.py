from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable

from jose import ExpiredSignatureError, JWTError, jwt

from golf_course_admin.auth.models import PrincipalKind, TokenClaims
from golf_course_admin.configs.settings import Settings
from golf_course_admin.errors import ConfigurationError
from golf_course_admin.configs.logging_config import get_logger
from golf_course_admin.utils.time_utils import utc_now

log = get_logger(__name__)

DEV_FALLBACK_SECRET = "golf-course-admin-dev-secret-change-me"


def load_signing_secret(settings: Settings) -> str:
    """
    Resolve the process-wide signing secret once at startup.

    With JWT_SECRET_POLICY=strict a missing secret stops the service; with
    lenient it falls back to a fixed development secret.
    """
    if settings.JWT_SECRET:
        return settings.JWT_SECRET
    if settings.JWT_SECRET_POLICY == "strict":
        raise ConfigurationError("JWT_SECRET environment variable is required")
    log.warning(
        "jwt.secret_missing policy=lenient using development fallback secret; "
        "set JWT_SECRET before deploying"
    )
    return DEV_FALLBACK_SECRET


class TokenService:
    """Issues and verifies HS256 tokens for both auth domains."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        system_ttl: timedelta = timedelta(hours=24),
        course_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ConfigurationError("signing secret must not be empty")
        self._secret = secret
        self._alg = algorithm
        self._ttl = {PrincipalKind.SYSTEM: system_ttl, PrincipalKind.COURSE: course_ttl}
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "TokenService":
        return cls(
            load_signing_secret(settings),
            algorithm=settings.jwt_alg,
            system_ttl=timedelta(hours=settings.SYSTEM_TOKEN_TTL_HOURS),
            course_ttl=timedelta(days=settings.COURSE_TOKEN_TTL_DAYS),
            **kwargs,
        )

    def issue_system_token(self, subject_id: int, name: str, role: str) -> str:
        return self._issue(PrincipalKind.SYSTEM, subject_id, name, role)

    def issue_course_token(self, subject_id: int, name: str, role: str) -> str:
        return self._issue(PrincipalKind.COURSE, subject_id, name, role)

    def _issue(self, kind: PrincipalKind, subject_id: int, name: str, role: str) -> str:
        now = self._clock()
        payload = {
            "sub": str(subject_id),
            "userId": subject_id,
            "name": name,
            "role": role,
            "typ": kind.value,
            "iat": now,
            "exp": now + self._ttl[kind],
        }
        log.info("jwt.issue typ=%s sub=%s role=%s", kind.value, subject_id, role)
        return jwt.encode(payload, self._secret, algorithm=self._alg)

    def decode(self, token: str, expected: PrincipalKind) -> TokenClaims | None:
        """
        Verify signature and expiry.

        Returns None for any unusable token. Expired and malformed tokens are
        told apart in the logs only.
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._alg])
        except ExpiredSignatureError:
            log.info("jwt.decode expired typ=%s", expected.value)
            return None
        except JWTError as e:
            log.info("jwt.decode invalid typ=%s error=%s", expected.value, str(e))
            return None

        if claims.get("typ") != expected.value:
            log.info("jwt.decode wrong_type expected=%s got=%s", expected.value, claims.get("typ"))
            return None
        user_id = claims.get("userId")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            log.info("jwt.decode missing_subject typ=%s", expected.value)
            return None

        log.debug("jwt.decode ok typ=%s sub=%s role=%s", expected.value, user_id, claims.get("role"))
        return TokenClaims(
            user_id=user_id,
            name=str(claims.get("name", "")),
            role=str(claims.get("role", "")),
            token_type=expected,
            issued_at=int(claims.get("iat", 0)),
            expires_at=int(claims["exp"]),
        )
