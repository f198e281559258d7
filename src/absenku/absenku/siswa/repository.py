from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Siswa


class SiswaRepository(Protocol):
    def get_by_id(self, siswa_id: int) -> Optional[Siswa]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Siswa]:
        raise NotImplementedError

    def get_by_nisn(self, nisn: str) -> Optional[Siswa]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Siswa]:
        raise NotImplementedError

    def list_by_kelas(self, kelas_ids: Sequence[int]) -> Sequence[Siswa]:
        raise NotImplementedError

    def create(self, *, user_id: int, nisn: str, nama: str, kelas_id: int, foto: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, siswa_id: int, *, fields: dict) -> bool:
        """Update the given columns (nisn, nama, kelas_id, foto)."""
        raise NotImplementedError

    def delete_by_id(self, siswa_id: int) -> bool:
        raise NotImplementedError

    def count(self, kelas_ids: Optional[Sequence[int]] = None) -> int:
        raise NotImplementedError
