from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ADMIN_ONLY, STAFF
from ..rpc.schemas import GuruIdInput, KelasIdInput
from .schemas import AssignmentInput, RemoveAssignmentInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.assignment_service

    @rpc.mutation("assignments.assign", input=AssignmentInput, roles=ADMIN_ONLY)
    def assign_teacher(data: AssignmentInput):
        return service.assign(guru_id=data.guru_id, kelas_id=data.kelas_id, is_homeroom=data.is_homeroom)

    @rpc.mutation("assignments.remove", input=RemoveAssignmentInput, roles=ADMIN_ONLY)
    def remove_teacher(data: RemoveAssignmentInput):
        return service.remove(guru_id=data.guru_id, kelas_id=data.kelas_id)

    @rpc.mutation("assignments.update", input=AssignmentInput, roles=ADMIN_ONLY)
    def update_assignment(data: AssignmentInput):
        return service.update(guru_id=data.guru_id, kelas_id=data.kelas_id, is_homeroom=data.is_homeroom)

    @rpc.query("assignments.getByTeacher", input=GuruIdInput, roles=STAFF)
    def get_teacher_assignments(data: GuruIdInput):
        return service.get_by_teacher(data.guru_id)

    @rpc.query("assignments.getByClass", input=KelasIdInput, roles=STAFF)
    def get_class_assignments(data: KelasIdInput):
        return service.get_by_class(data.kelas_id)
