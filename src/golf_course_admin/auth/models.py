from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class PrincipalKind(str, Enum):
    SYSTEM = "system"
    COURSE = "course"


class Role(str, Enum):
    """Golf-course staff roles, lowest to highest."""

    STAFF = "STAFF"
    MANAGER = "MANAGER"
    OWNER = "OWNER"


class Principal(Protocol):
    kind: PrincipalKind
    id: int
    role: str
    is_active: bool


@dataclass(frozen=True)
class TokenClaims:
    """Verified token payload. Informational only; the store is authoritative."""

    user_id: int
    name: str
    role: str
    token_type: PrincipalKind
    issued_at: int
    expires_at: int
