from __future__ import annotations

from typing import Sequence

from ..core.exceptions import NotFoundError, ValidationError
from ..guru.repository import GuruRepository
from ..kelas.model import Kelas
from ..kelas.repository import KelasRepository
from .model import TeacherAssignment
from .repository import AssignmentRepository


class AssignmentService:
    """Teacher-to-class assignments. The homeroom flag is mirrored in ``kelas.wali_kelas_id``."""

    def __init__(self, assignments: AssignmentRepository, gurus: GuruRepository, kelas: KelasRepository):
        self._assignments = assignments
        self._gurus = gurus
        self._kelas = kelas

    def _require_guru(self, guru_id: int) -> None:
        if not self._gurus.get_by_id(int(guru_id)):
            raise NotFoundError("Guru tidak ditemukan")

    def _require_kelas(self, kelas_id: int) -> Kelas:
        kelas = self._kelas.get_by_id(int(kelas_id))
        if not kelas:
            raise NotFoundError("Kelas tidak ditemukan")
        return kelas

    def _check_homeroom_free(self, kelas: Kelas, guru_id: int) -> None:
        taken = kelas.wali_kelas_id is not None and kelas.wali_kelas_id != int(guru_id)
        taken = taken or any(
            a.is_homeroom and a.guru_id != int(guru_id) for a in self._assignments.list_by_kelas(kelas.id)
        )
        if taken:
            raise ValidationError("Kelas sudah memiliki wali kelas")

    def assign(self, *, guru_id: int, kelas_id: int, is_homeroom: bool = False) -> TeacherAssignment:
        self._require_guru(guru_id)
        kelas = self._require_kelas(kelas_id)

        if self._assignments.get(guru_id=int(guru_id), kelas_id=kelas.id):
            raise ValidationError("Guru sudah ditugaskan di kelas ini")
        if is_homeroom:
            self._check_homeroom_free(kelas, guru_id)

        self._assignments.create(guru_id=int(guru_id), kelas_id=kelas.id, is_homeroom=bool(is_homeroom))
        if is_homeroom:
            self._kelas.update(kelas.id, fields={"wali_kelas_id": int(guru_id)})

        created = self._assignments.get(guru_id=int(guru_id), kelas_id=kelas.id)
        if not created:
            raise ValidationError("Gagal menugaskan guru")
        return created

    def remove(self, *, guru_id: int, kelas_id: int) -> dict:
        assignment = self._assignments.get(guru_id=int(guru_id), kelas_id=int(kelas_id))
        if not assignment:
            raise NotFoundError("Penugasan guru tidak ditemukan")

        # Attendance history keeps its guru_id.
        self._assignments.delete_by_id(assignment.id)
        if assignment.is_homeroom:
            kelas = self._kelas.get_by_id(assignment.kelas_id)
            if kelas and kelas.wali_kelas_id == assignment.guru_id:
                self._kelas.update(kelas.id, fields={"wali_kelas_id": None})
        return {"success": True}

    def update(self, *, guru_id: int, kelas_id: int, is_homeroom: bool) -> TeacherAssignment:
        assignment = self._assignments.get(guru_id=int(guru_id), kelas_id=int(kelas_id))
        if not assignment:
            raise NotFoundError("Penugasan guru tidak ditemukan")
        kelas = self._require_kelas(kelas_id)

        if is_homeroom and not assignment.is_homeroom:
            self._check_homeroom_free(kelas, guru_id)
            self._kelas.update(kelas.id, fields={"wali_kelas_id": assignment.guru_id})
        elif not is_homeroom and assignment.is_homeroom and kelas.wali_kelas_id == assignment.guru_id:
            self._kelas.update(kelas.id, fields={"wali_kelas_id": None})

        self._assignments.set_homeroom(assignment.id, is_homeroom=bool(is_homeroom))
        updated = self._assignments.get(guru_id=int(guru_id), kelas_id=int(kelas_id))
        if not updated:
            raise NotFoundError("Penugasan guru tidak ditemukan")
        return updated

    def get_by_teacher(self, guru_id: int) -> Sequence[TeacherAssignment]:
        self._require_guru(guru_id)
        return self._assignments.list_by_guru(int(guru_id))

    def get_by_class(self, kelas_id: int) -> Sequence[TeacherAssignment]:
        self._require_kelas(kelas_id)
        return self._assignments.list_by_kelas(int(kelas_id))
