from __future__ import annotations

from typing import Generic, Optional, Protocol, TypeVar

from golf_course_admin.auth.jwt import TokenService
from golf_course_admin.auth.models import Principal, PrincipalKind, TokenClaims
from golf_course_admin.configs.logging_config import get_logger, security_event
from golf_course_admin.domain.entities.course_user import CourseUser
from golf_course_admin.domain.entities.golf_course import GolfCourse
from golf_course_admin.domain.entities.system_user import SystemUser
from golf_course_admin.errors import (
    AuthError,
    InactiveOrUnknown,
    InvalidToken,
    MissingToken,
    TenantMismatch,
)

log = get_logger(__name__)

P = TypeVar("P", bound=Principal)

BEARER_PREFIX = "Bearer "


class PrincipalStore(Protocol[P]):
    async def find_by_id(self, user_id: int) -> Optional[P]: ...


class CourseStore(Protocol):
    async def find_by_id(self, course_id: int) -> Optional[GolfCourse]: ...


def _bearer_token(value: str | None) -> str:
    if not value or not value.startswith(BEARER_PREFIX):
        raise MissingToken()
    token = value[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingToken()
    return token


class AuthResolver(Generic[P]):
    """
    Turns an Authorization header into a live principal.

    Pipeline: extract bearer token, verify it, reload the subject from the
    store. The store copy is returned, never the token's claims, so a
    deactivated or deleted account is refused on its next request even while
    its tokens are unexpired.
    """

    def __init__(self, tokens: TokenService, store: PrincipalStore[P], kind: PrincipalKind):
        self._tokens = tokens
        self._store = store
        self._kind = kind

    async def resolve(self, authorization: str | None) -> P:
        try:
            return await self._resolve(authorization)
        except AuthError as exc:
            security_event(log, "auth.denied", typ=self._kind.value, reason=exc.reason)
            raise

    async def _resolve(self, authorization: str | None) -> P:
        token = _bearer_token(authorization)
        claims = self._tokens.decode(token, self._kind)
        if claims is None:
            raise InvalidToken()
        return await self._load(claims)

    async def _load(self, claims: TokenClaims) -> P:
        try:
            principal = await self._store.find_by_id(claims.user_id)
        except Exception:
            # store unreachable: fail closed
            log.exception("auth.store_lookup_failed typ=%s sub=%s", self._kind.value, claims.user_id)
            raise InactiveOrUnknown()
        if principal is None:
            log.info("auth.unknown_subject typ=%s sub=%s", self._kind.value, claims.user_id)
            raise InactiveOrUnknown()
        if not principal.is_active:
            log.info("auth.inactive_subject typ=%s sub=%s", self._kind.value, claims.user_id)
            raise InactiveOrUnknown()
        return principal


class SystemAuthResolver(AuthResolver[SystemUser]):
    def __init__(self, tokens: TokenService, store: PrincipalStore[SystemUser]):
        super().__init__(tokens, store, PrincipalKind.SYSTEM)


class CourseAuthResolver(AuthResolver[CourseUser]):
    """
    Adds the tenant checks: the principal must belong to the course in the
    URL, and that course must still be active.
    """

    def __init__(
        self,
        tokens: TokenService,
        store: PrincipalStore[CourseUser],
        courses: CourseStore | None = None,
    ):
        super().__init__(tokens, store, PrincipalKind.COURSE)
        self._courses = courses

    async def _ensure_course_active(self, principal: CourseUser) -> None:
        if self._courses is None:
            return
        try:
            course = await self._courses.find_by_id(principal.golf_course_id)
        except Exception:
            log.exception("auth.course_lookup_failed course_id=%s", principal.golf_course_id)
            course = None
        if course is None or not course.is_active:
            security_event(
                log,
                "auth.denied",
                typ=PrincipalKind.COURSE.value,
                reason="inactive_course",
                user_id=principal.id,
                course_id=principal.golf_course_id,
            )
            raise InactiveOrUnknown()

    async def resolve(
        self, authorization: str | None, expected_course_id: int | None = None
    ) -> CourseUser:
        principal = await super().resolve(authorization)
        if expected_course_id is not None and principal.golf_course_id != expected_course_id:
            security_event(
                log,
                "auth.denied",
                typ=PrincipalKind.COURSE.value,
                reason=TenantMismatch.reason,
                user_id=principal.id,
                user_course=principal.golf_course_id,
                requested_course=expected_course_id,
            )
            raise TenantMismatch()
        await self._ensure_course_active(principal)
        log.info(
            "auth.principal typ=course user_id=%s course_id=%s role=%s",
            principal.id,
            principal.golf_course_id,
            principal.role,
        )
        return principal
