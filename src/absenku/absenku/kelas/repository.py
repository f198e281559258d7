from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Kelas


class KelasRepository(Protocol):
    def get_by_id(self, kelas_id: int) -> Optional[Kelas]:
        raise NotImplementedError

    def get_by_name(self, nama_kelas: str) -> Optional[Kelas]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Kelas]:
        raise NotImplementedError

    def list_by_wali_kelas(self, guru_id: int) -> Sequence[Kelas]:
        raise NotImplementedError

    def list_by_teacher(self, guru_id: int) -> Sequence[Kelas]:
        """Classes where the guru is wali kelas or has an assignment."""
        raise NotImplementedError

    def create(self, *, nama_kelas: str, wali_kelas_id: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, kelas_id: int, *, fields: dict) -> bool:
        """Update the given columns (nama_kelas, wali_kelas_id; None clears the wali kelas)."""
        raise NotImplementedError

    def delete_by_id(self, kelas_id: int) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
