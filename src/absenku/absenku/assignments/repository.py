from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TeacherAssignment


class AssignmentRepository(Protocol):
    def get(self, *, guru_id: int, kelas_id: int) -> Optional[TeacherAssignment]:
        raise NotImplementedError

    def list_by_guru(self, guru_id: int) -> Sequence[TeacherAssignment]:
        raise NotImplementedError

    def list_by_kelas(self, kelas_id: int) -> Sequence[TeacherAssignment]:
        raise NotImplementedError

    def create(self, *, guru_id: int, kelas_id: int, is_homeroom: bool) -> int:
        raise NotImplementedError

    def set_homeroom(self, assignment_id: int, *, is_homeroom: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, assignment_id: int) -> bool:
        raise NotImplementedError
