from __future__ import annotations

from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from golf_course_admin.auth.jwt import TokenService
from golf_course_admin.auth.passwords import PasswordHasher
from golf_course_admin.configs.settings import Settings
from golf_course_admin.main import Stores, create_app

from fakes import (
    FakeRedis,
    MemoryCourseUserRepository,
    MemoryDeviceRepository,
    MemoryGolfCourseRepository,
    MemorySystemUserRepository,
)

TEST_SECRET = "unit-test-signing-secret"

# bcrypt's minimum cost keeps the suite fast; production uses 12
TEST_ROUNDS = 4


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=TEST_ROUNDS,
        LOGIN_RATE_LIMIT_ATTEMPTS=5,
        LOGIN_RATE_LIMIT_WINDOW_SECONDS=900,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture
def stores() -> Stores:
    return Stores(
        system_users=MemorySystemUserRepository(),
        course_users=MemoryCourseUserRepository(),
        golf_courses=MemoryGolfCourseRepository(),
        devices=MemoryDeviceRepository(),
        redis=FakeRedis(),
    )


class Seed:
    """Writes records straight into the in-memory stores."""

    def __init__(self, stores: Stores, hasher: PasswordHasher):
        self.stores = stores
        self.hasher = hasher

    def system_user(self, name: str = "admin1", password: str = "Secret123!", **fields: Any):
        return self.stores.system_users._insert(
            {
                "name": name,
                "password_hash": self.hasher.hash(password),
                "email": fields.pop("email", f"{name}@example.com"),
                "role": fields.pop("role", "admin"),
                "is_active": fields.pop("is_active", True),
                **fields,
            }
        )

    def golf_course(self, name: str = "Pine Valley", **fields: Any):
        return self.stores.golf_courses._insert({"name": name, "is_active": True, **fields})

    def course_user(
        self,
        golf_course_id: int,
        username: str = "staff1",
        password: str = "Password1!",
        role: str = "STAFF",
        **fields: Any,
    ):
        return self.stores.course_users._insert(
            {
                "golf_course_id": golf_course_id,
                "username": username,
                "password_hash": self.hasher.hash(password),
                "role": role,
                "email": fields.pop("email", ""),
                "first_name": fields.pop("first_name", ""),
                "last_name": fields.pop("last_name", ""),
                "is_active": fields.pop("is_active", True),
                **fields,
            }
        )

    def device(
        self,
        golf_course_id: int,
        device_id: str = "TAB-001",
        name: str = "Front desk tablet",
        **fields: Any,
    ):
        return self.stores.devices._insert(
            {
                "name": name,
                "device_id": device_id,
                "device_type": fields.pop("device_type", "android"),
                "golf_course_id": golf_course_id,
                "is_active": fields.pop("is_active", True),
                **fields,
            }
        )

    def deactivate_system_user(self, user_id: int) -> None:
        self.stores.system_users.docs[user_id]["is_active"] = False

    def deactivate_course_user(self, user_id: int) -> None:
        self.stores.course_users.docs[user_id]["is_active"] = False


@pytest.fixture
def seed(stores: Stores, hasher: PasswordHasher) -> Seed:
    return Seed(stores, hasher)


@pytest.fixture
def app(settings: Settings, stores: Stores, tokens: TokenService):
    return create_app(settings, stores=stores, token_service=tokens)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
