"""
Shared pydantic input schemas for RPC procedures.

Clients send camelCase keys (``userId``, ``kelasId``); snake_case is accepted too.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..absensi.model import AbsensiFilter
from ..core.enums import AbsensiStatus


class Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---- Lookups ----
class IdInput(Schema):
    id: int


class UserIdInput(Schema):
    user_id: int = Field(alias="userId")


class GuruIdInput(Schema):
    guru_id: int = Field(alias="guruId")


class SiswaIdInput(Schema):
    siswa_id: int = Field(alias="siswaId")


class KelasIdInput(Schema):
    kelas_id: int = Field(alias="kelasId")


class OptionalKelasIdInput(Schema):
    kelas_id: Optional[int] = Field(default=None, alias="kelasId")


# ---- Profiles ----
class UpdateProfileInput(Schema):
    user_id: int
    nama: Optional[str] = Field(default=None, min_length=1)
    foto: Optional[str] = None


# ---- Attendance filter ----
class AttendanceFilter(Schema):
    kelas_id: Optional[int] = None
    siswa_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AbsensiStatus] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date harus <= end_date")
        return self

    def to_domain(self) -> AbsensiFilter:
        return AbsensiFilter(
            kelas_id=self.kelas_id,
            siswa_id=self.siswa_id,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
        )
