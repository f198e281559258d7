from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Guru:
    """Teacher profile linked to a user with role ``guru``."""

    id: int
    user_id: int
    nip: str
    nama: str
    foto: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
