from __future__ import annotations

from datetime import timedelta

import pytest

from golf_course_admin.auth.jwt import TokenService
from golf_course_admin.auth.resolver import CourseAuthResolver, SystemAuthResolver
from golf_course_admin.errors import (
    AuthError,
    ForbiddenError,
    InactiveOrUnknown,
    InvalidToken,
    MissingToken,
    TenantMismatch,
)
from golf_course_admin.utils.time_utils import utc_now

from fakes import MemoryCourseUserRepository, MemoryGolfCourseRepository, MemorySystemUserRepository

pytestmark = pytest.mark.asyncio

SECRET = "resolver-secret"


@pytest.fixture
def svc() -> TokenService:
    return TokenService(SECRET)


@pytest.fixture
def system_store() -> MemorySystemUserRepository:
    store = MemorySystemUserRepository()
    store._insert({"name": "admin1", "password_hash": "x", "email": "", "role": "admin", "is_active": True})
    return store


@pytest.fixture
def course_store() -> MemoryCourseUserRepository:
    store = MemoryCourseUserRepository()
    store._insert(
        {"username": "pro", "golf_course_id": 7, "password_hash": "x", "role": "MANAGER", "is_active": True}
    )
    return store


def header(token: str) -> str:
    return f"Bearer {token}"


async def test_system_principal_resolves_to_live_record(svc, system_store) -> None:
    resolver = SystemAuthResolver(svc, system_store)
    # token claims are stale on purpose: the store copy must win
    token = svc.issue_system_token(1, "old-name", "superuser")
    principal = await resolver.resolve(header(token))
    assert principal.id == 1
    assert principal.name == "admin1"
    assert principal.role == "admin"


@pytest.mark.parametrize("value", [None, "", "Token abc", "Bearer "])
async def test_missing_or_malformed_header(svc, system_store, value) -> None:
    with pytest.raises(MissingToken):
        await SystemAuthResolver(svc, system_store).resolve(value)


async def test_tampered_token(svc, system_store) -> None:
    head, _, signature = svc.issue_system_token(1, "admin1", "admin").split(".")
    other_payload = svc.issue_system_token(2, "intruder", "admin").split(".")[1]
    tampered = f"{head}.{other_payload}.{signature}"
    with pytest.raises(InvalidToken):
        await SystemAuthResolver(svc, system_store).resolve(header(tampered))


async def test_expired_token(svc, system_store) -> None:
    old = TokenService(SECRET, clock=lambda: utc_now() - timedelta(hours=25))
    with pytest.raises(InvalidToken):
        await SystemAuthResolver(svc, system_store).resolve(header(old.issue_system_token(1, "admin1", "admin")))


async def test_deleted_subject(svc, system_store) -> None:
    token = svc.issue_system_token(1, "admin1", "admin")
    await system_store.delete(1)
    with pytest.raises(InactiveOrUnknown):
        await SystemAuthResolver(svc, system_store).resolve(header(token))


async def test_deactivated_subject(svc, system_store) -> None:
    token = svc.issue_system_token(1, "admin1", "admin")
    system_store.docs[1]["is_active"] = False
    with pytest.raises(InactiveOrUnknown):
        await SystemAuthResolver(svc, system_store).resolve(header(token))


async def test_store_failure_fails_closed(svc, system_store) -> None:
    token = svc.issue_system_token(1, "admin1", "admin")
    system_store.unavailable = True
    with pytest.raises(InactiveOrUnknown):
        await SystemAuthResolver(svc, system_store).resolve(header(token))


async def test_course_token_rejected_by_system_resolver(svc, system_store) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    with pytest.raises(InvalidToken):
        await SystemAuthResolver(svc, system_store).resolve(header(token))


async def test_course_principal_in_own_course(svc, course_store) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    principal = await CourseAuthResolver(svc, course_store).resolve(header(token), expected_course_id=7)
    assert principal.golf_course_id == 7
    assert principal.role == "MANAGER"


async def test_tenant_mismatch(svc, course_store) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    with pytest.raises(TenantMismatch) as exc_info:
        await CourseAuthResolver(svc, course_store).resolve(header(token), expected_course_id=5)
    assert isinstance(exc_info.value, ForbiddenError)
    assert exc_info.value.http_status == 403


async def test_tenant_claim_in_token_is_not_trusted(svc, course_store) -> None:
    # role claim says course 5, the store says course 7
    token = svc.issue_course_token(1, "pro", "OWNER:5")
    with pytest.raises(TenantMismatch):
        await CourseAuthResolver(svc, course_store).resolve(header(token), expected_course_id=5)


async def test_course_resolver_without_expected_course(svc, course_store) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    principal = await CourseAuthResolver(svc, course_store).resolve(header(token))
    assert principal.id == 1


async def test_deactivated_course_user_denied_before_tenant_check(svc, course_store) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    course_store.docs[1]["is_active"] = False
    with pytest.raises(InactiveOrUnknown):
        await CourseAuthResolver(svc, course_store).resolve(header(token), expected_course_id=5)


async def test_system_token_rejected_by_course_resolver(svc, course_store) -> None:
    token = svc.issue_system_token(1, "admin1", "admin")
    with pytest.raises(InvalidToken):
        await CourseAuthResolver(svc, course_store).resolve(header(token), expected_course_id=7)


async def test_denials_are_auth_errors_with_uniform_messages(svc, system_store) -> None:
    resolver = SystemAuthResolver(svc, system_store)
    expired = TokenService(SECRET, clock=lambda: utc_now() - timedelta(days=2)).issue_system_token(1, "a", "admin")
    messages = set()
    for value in (header("garbage.token.value"), header(expired)):
        with pytest.raises(AuthError) as exc_info:
            await resolver.resolve(value)
        assert exc_info.value.http_status == 401
        messages.add(exc_info.value.message)
    # expired and malformed look the same to the caller
    assert len(messages) == 1


@pytest.fixture
def course_registry() -> MemoryGolfCourseRepository:
    registry = MemoryGolfCourseRepository()
    for name in ("Course 1", "Course 2", "Course 3", "Course 4", "Course 5", "Course 6", "Course 7"):
        registry._insert({"name": name, "is_active": True})
    return registry


async def test_active_course_passes(svc, course_store, course_registry) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    resolver = CourseAuthResolver(svc, course_store, course_registry)
    principal = await resolver.resolve(header(token), expected_course_id=7)
    assert principal.golf_course_id == 7


async def test_deactivated_course_denied(svc, course_store, course_registry) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    course_registry.docs[7]["is_active"] = False
    with pytest.raises(InactiveOrUnknown):
        await CourseAuthResolver(svc, course_store, course_registry).resolve(header(token), expected_course_id=7)


async def test_course_lookup_failure_fails_closed(svc, course_store, course_registry) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    course_registry.unavailable = True
    with pytest.raises(InactiveOrUnknown):
        await CourseAuthResolver(svc, course_store, course_registry).resolve(header(token), expected_course_id=7)


async def test_tenant_mismatch_reported_before_course_state(svc, course_store, course_registry) -> None:
    token = svc.issue_course_token(1, "pro", "MANAGER:7")
    course_registry.docs[5]["is_active"] = False
    with pytest.raises(TenantMismatch):
        await CourseAuthResolver(svc, course_store, course_registry).resolve(header(token), expected_course_id=5)
