from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account. Guru/siswa profiles point at it through ``user_id``.

    Note: never serialize this object directly, it carries the password hash.
    Use :meth:`to_public`.
    """

    id: int
    username: str
    password_hash: str
    role: Role
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role.value,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
