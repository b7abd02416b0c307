from __future__ import annotations

from typing import Union

from golf_course_admin.auth.models import Principal, PrincipalKind, Role
from golf_course_admin.errors import InsufficientRole

ROLE_LEVELS: dict[str, int] = {
    Role.STAFF.value: 1,
    Role.MANAGER.value: 2,
    Role.OWNER.value: 3,
}

RoleLike = Union[str, Role, Principal]


def role_level(role: RoleLike | None) -> int:
    """Rank of a role; unknown roles rank 0 and carry no privilege."""
    if role is None:
        return 0
    if isinstance(role, Role):
        return ROLE_LEVELS[role.value]
    if not isinstance(role, str):
        role = role.role
    return ROLE_LEVELS.get(role, 0)


def at_least(role: RoleLike | None, required: Role | str) -> bool:
    required_level = role_level(required)
    if required_level == 0:
        return False
    return role_level(role) >= required_level


def is_same_principal(a: Principal, b: Principal) -> bool:
    return a.kind == b.kind and a.id == b.id


def can_manage(actor: Principal, target: Principal) -> bool:
    """
    Management operations never target the actor's own record. Course staff
    may additionally only manage peers at or below their own level.
    """
    if is_same_principal(actor, target):
        return False
    if actor.kind == PrincipalKind.COURSE:
        return role_level(actor) >= role_level(target)
    return True


def require_at_least(principal: Principal, required: Role) -> None:
    if not at_least(principal, required):
        raise InsufficientRole()


def ensure_can_manage(actor: Principal, target: Principal) -> None:
    if is_same_principal(actor, target):
        raise InsufficientRole("cannot perform this operation on your own account")
    if not can_manage(actor, target):
        raise InsufficientRole()


def ensure_can_assign(actor: Principal, new_role: Role | str) -> None:
    """A course actor cannot hand out a role above its own."""
    if actor.kind != PrincipalKind.COURSE:
        return
    if role_level(new_role) > role_level(actor):
        raise InsufficientRole("cannot assign a role above your own")
