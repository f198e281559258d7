from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TeacherAssignment:
    """A guru teaching in a kelas. ``is_homeroom`` marks the wali kelas."""

    id: int
    guru_id: int
    kelas_id: int
    is_homeroom: bool = False
    assigned_at: Optional[datetime] = None
    guru_nama: Optional[str] = None
    nama_kelas: Optional[str] = None
