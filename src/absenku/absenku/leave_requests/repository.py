from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import JenisPengajuan, LeaveRequestStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def find(
        self,
        *,
        status: Optional[LeaveRequestStatus] = None,
        siswa_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""
        raise NotImplementedError

    def create(
        self,
        *,
        siswa_id: int,
        jenis: JenisPengajuan,
        start_date: date,
        end_date: date,
        alasan: str,
    ) -> int:
        raise NotImplementedError

    def decide(
        self,
        request_id: int,
        *,
        status: LeaveRequestStatus,
        approved_by: int,
        approved_at: datetime,
    ) -> bool:
        """Set the decision; only affects pending requests."""
        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError
