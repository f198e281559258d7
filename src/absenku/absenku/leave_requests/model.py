from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import JenisPengajuan, LeaveRequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    """Multi-day izin/sakit request awaiting a decision."""

    id: int
    siswa_id: int
    jenis: JenisPengajuan
    start_date: date
    end_date: date
    alasan: str
    status: LeaveRequestStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    siswa_nama: Optional[str] = None
    nama_kelas: Optional[str] = None
