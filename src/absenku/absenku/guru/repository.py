from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Guru


class GuruRepository(Protocol):
    def get_by_id(self, guru_id: int) -> Optional[Guru]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Guru]:
        raise NotImplementedError

    def get_by_nip(self, nip: str) -> Optional[Guru]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Guru]:
        raise NotImplementedError

    def create(self, *, user_id: int, nip: str, nama: str, foto: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, guru_id: int, *, fields: dict) -> bool:
        """Update the given columns (nip, nama, foto)."""
        raise NotImplementedError

    def delete_by_id(self, guru_id: int) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
