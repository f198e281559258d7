from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Kelas:
    id: int
    nama_kelas: str
    wali_kelas_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Filled by list queries.
    wali_kelas_nama: Optional[str] = None
    jumlah_siswa: int = 0
