"""
Pydantic schemas for leave request procedures.
"""

from datetime import date

from pydantic import Field, model_validator

from ..core.enums import JenisPengajuan, LeaveRequestStatus
from ..rpc.schemas import Schema


class CreateLeaveRequestInput(Schema):
    siswa_id: int
    start_date: date
    end_date: date
    reason: str = Field(min_length=1)
    jenis: JenisPengajuan = JenisPengajuan.IZIN


class ApproveLeaveRequestInput(Schema):
    id: int
    approved_by: int
    status: LeaveRequestStatus

    @model_validator(mode="after")
    def _decision_only(self):
        if self.status == LeaveRequestStatus.PENDING:
            raise ValueError("status harus approved atau rejected")
        return self


class LeaveStatusInput(Schema):
    status: LeaveRequestStatus
