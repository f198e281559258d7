from __future__ import annotations

from typing import Any, Optional, Sequence

from ..assignments.repository import AssignmentRepository
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..guru.repository import GuruRepository
from .model import Kelas
from .repository import KelasRepository

# Marks "wali_kelas_id not supplied" (None means: clear the wali kelas).
KEEP = object()


class KelasService:
    def __init__(self, kelas: KelasRepository, gurus: GuruRepository, assignments: AssignmentRepository):
        self._kelas = kelas
        self._gurus = gurus
        self._assignments = assignments

    def _require_guru(self, guru_id: int) -> None:
        if not self._gurus.get_by_id(int(guru_id)):
            raise NotFoundError("Wali kelas (guru) tidak ditemukan")

    def _sync_homeroom(self, kelas_id: int, wali_kelas_id: Optional[int]) -> None:
        """Keep the guru_kelas homeroom rows in line with kelas.wali_kelas_id."""
        for a in self._assignments.list_by_kelas(kelas_id):
            if a.is_homeroom and a.guru_id != wali_kelas_id:
                self._assignments.set_homeroom(a.id, is_homeroom=False)
        if wali_kelas_id is None:
            return
        current = self._assignments.get(guru_id=wali_kelas_id, kelas_id=kelas_id)
        if not current:
            self._assignments.create(guru_id=wali_kelas_id, kelas_id=kelas_id, is_homeroom=True)
        elif not current.is_homeroom:
            self._assignments.set_homeroom(current.id, is_homeroom=True)

    def create(self, *, nama_kelas: str, wali_kelas_id: Optional[int] = None) -> Kelas:
        nama_kelas = require_non_empty(nama_kelas, "Nama kelas")
        if self._kelas.get_by_name(nama_kelas):
            raise ValidationError("Nama kelas sudah digunakan")
        if wali_kelas_id is not None:
            self._require_guru(wali_kelas_id)
            wali_kelas_id = int(wali_kelas_id)

        kelas_id = self._kelas.create(nama_kelas=nama_kelas, wali_kelas_id=wali_kelas_id)
        self._sync_homeroom(kelas_id, wali_kelas_id)
        kelas = self._kelas.get_by_id(kelas_id)
        if not kelas:
            raise ValidationError("Gagal membuat kelas")
        return kelas

    def get_all(self) -> Sequence[Kelas]:
        return self._kelas.list_all()

    def get_by_id(self, kelas_id: int) -> Optional[Kelas]:
        return self._kelas.get_by_id(int(kelas_id))

    def get_by_wali_kelas(self, guru_id: int) -> Sequence[Kelas]:
        return self._kelas.list_by_wali_kelas(int(guru_id))

    def get_by_teacher(self, guru_id: int) -> Sequence[Kelas]:
        return self._kelas.list_by_teacher(int(guru_id))

    def update(self, kelas_id: int, *, nama_kelas: Optional[str] = None, wali_kelas_id: Any = KEEP) -> Optional[Kelas]:
        kelas = self._kelas.get_by_id(int(kelas_id))
        if not kelas:
            return None

        fields: dict = {}
        if nama_kelas is not None:
            nama_kelas = require_non_empty(nama_kelas, "Nama kelas")
            other = self._kelas.get_by_name(nama_kelas)
            if other and other.id != kelas.id:
                raise ValidationError("Nama kelas sudah digunakan")
            fields["nama_kelas"] = nama_kelas
        if wali_kelas_id is not KEEP:
            if wali_kelas_id is not None:
                self._require_guru(wali_kelas_id)
                wali_kelas_id = int(wali_kelas_id)
            fields["wali_kelas_id"] = wali_kelas_id

        if fields and not self._kelas.update(kelas.id, fields=fields):
            return None
        if "wali_kelas_id" in fields:
            self._sync_homeroom(kelas.id, fields["wali_kelas_id"])
        return self._kelas.get_by_id(kelas.id)

    def delete(self, kelas_id: int) -> bool:
        # Students, attendance and assignments of the class go with it (ON DELETE CASCADE).
        return self._kelas.delete_by_id(int(kelas_id))
