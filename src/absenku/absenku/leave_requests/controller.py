from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ANY_ROLE, STAFF
from ..rpc.schemas import IdInput, SiswaIdInput
from .schemas import ApproveLeaveRequestInput, CreateLeaveRequestInput, LeaveStatusInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.leave_request_service

    @rpc.mutation("leaveRequests.create", input=CreateLeaveRequestInput, roles=ANY_ROLE)
    def create_leave_request(data: CreateLeaveRequestInput):
        return service.create(
            siswa_id=data.siswa_id,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            jenis=data.jenis,
        )

    @rpc.mutation("leaveRequests.approve", input=ApproveLeaveRequestInput, roles=STAFF)
    def approve_leave_request(data: ApproveLeaveRequestInput):
        return service.approve(request_id=data.id, approved_by=data.approved_by, status=data.status)

    @rpc.query("leaveRequests.getAll", roles=STAFF)
    def get_leave_requests():
        return service.get_all()

    @rpc.query("leaveRequests.getPending", roles=STAFF)
    def get_pending_leave_requests():
        return service.get_pending()

    @rpc.query("leaveRequests.getByStatus", input=LeaveStatusInput, roles=STAFF)
    def get_leave_requests_by_status(data: LeaveStatusInput):
        return service.get_by_status(data.status)

    @rpc.query("leaveRequests.getByStudent", input=SiswaIdInput, roles=ANY_ROLE)
    def get_student_leave_requests(data: SiswaIdInput):
        return service.get_by_student(data.siswa_id)

    @rpc.mutation("leaveRequests.delete", input=IdInput, roles=ANY_ROLE)
    def delete_leave_request(data: IdInput):
        return service.delete(data.id)
