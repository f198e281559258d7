from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Siswa:
    """Student profile linked to a user with role ``siswa``."""

    id: int
    user_id: int
    nisn: str
    nama: str
    kelas_id: int
    foto: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Filled by list queries that join kelas.
    nama_kelas: Optional[str] = None
