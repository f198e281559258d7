from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Absensi, AbsensiFilter, NewAbsensi


class AbsensiRepository(Protocol):
    def get_by_id(self, absensi_id: int) -> Optional[Absensi]:
        raise NotImplementedError

    def get_for_siswa_and_date(self, siswa_id: int, tanggal: date) -> Optional[Absensi]:
        raise NotImplementedError

    def find(self, flt: AbsensiFilter, *, limit: Optional[int] = None) -> Sequence[Absensi]:
        """Newest date first."""
        raise NotImplementedError

    def create(self, record: NewAbsensi) -> int:
        raise NotImplementedError

    def create_many(self, records: Sequence[NewAbsensi]) -> list[int]:
        """Insert all records in one transaction."""
        raise NotImplementedError

    def update(self, absensi_id: int, *, fields: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, absensi_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, flt: AbsensiFilter) -> dict[str, int]:
        """Counts keyed by every AbsensiStatus value (missing statuses are 0)."""
        raise NotImplementedError
