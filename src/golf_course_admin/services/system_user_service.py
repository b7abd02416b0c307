from __future__ import annotations

from typing import Any

from golf_course_admin.auth.passwords import PasswordHasher
from golf_course_admin.auth.roles import ensure_can_manage, is_same_principal
from golf_course_admin.configs.logging_config import audit, get_logger
from golf_course_admin.configs.settings import Settings
from golf_course_admin.domain.entities.system_user import (
    SystemUser,
    SystemUserCreate,
    SystemUserUpdate,
)
from golf_course_admin.errors import ConflictError, InsufficientRole, NotFoundError
from golf_course_admin.repositories.system_user_repository import NAME_TAKEN, SystemUserRepository

log = get_logger(__name__)


class SystemUserService:
    def __init__(self, repo: SystemUserRepository, hasher: PasswordHasher):
        self._repo = repo
        self._hasher = hasher

    async def list_users(self) -> list[dict[str, Any]]:
        return [u.public() for u in await self._repo.list_all()]

    async def _get(self, user_id: int) -> SystemUser:
        user = await self._repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user(self, actor: SystemUser | None, body: SystemUserCreate) -> dict[str, Any]:
        if await self._repo.find_by_name(body.name) is not None:
            raise ConflictError(NAME_TAKEN)
        user = await self._repo.create(
            name=body.name,
            password_hash=await self._hasher.hash_async(body.password),
            email=body.email,
            role=body.role,
            is_active=body.is_active,
        )
        audit(log, "system_user.created", actor.id if actor else None, target=user.id, role=user.role)
        return user.public()

    async def update_user(self, actor: SystemUser, user_id: int, body: SystemUserUpdate) -> dict[str, Any]:
        existing = await self._get(user_id)

        if body.name != existing.name and await self._repo.find_by_name(body.name) is not None:
            raise ConflictError(NAME_TAKEN)
        # editing your own record is allowed, switching yourself off is not
        if is_same_principal(actor, existing) and body.is_active is False:
            raise InsufficientRole("cannot deactivate your own account")

        updates = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})
        if body.password:
            updates["password_hash"] = await self._hasher.hash_async(body.password)

        user = await self._repo.update(user_id, updates)
        if user is None:
            raise NotFoundError("User not found")
        audit(log, "system_user.updated", actor.id, target=user_id, fields=sorted(updates.keys()))
        return user.public()

    async def delete_user(self, actor: SystemUser, user_id: int) -> None:
        target = await self._get(user_id)
        ensure_can_manage(actor, target)
        if not await self._repo.delete(user_id):
            raise NotFoundError("User not found")
        audit(log, "system_user.deleted", actor.id, target=user_id)

    async def bootstrap_admin(self, settings: Settings) -> SystemUser | None:
        """Create the first admin from settings when the store is empty."""
        if not settings.BOOTSTRAP_ADMIN_NAME or not settings.BOOTSTRAP_ADMIN_PASSWORD:
            return None
        if await self._repo.count() > 0:
            log.info("bootstrap.admin skipped reason=users_exist")
            return None
        user = await self._repo.create(
            name=settings.BOOTSTRAP_ADMIN_NAME,
            password_hash=await self._hasher.hash_async(settings.BOOTSTRAP_ADMIN_PASSWORD),
            email=settings.BOOTSTRAP_ADMIN_EMAIL,
        )
        audit(log, "system_user.bootstrapped", None, target=user.id, name=user.name)
        return user
