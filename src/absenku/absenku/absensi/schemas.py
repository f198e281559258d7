"""
Pydantic schemas for absensi procedures.
"""

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, Field, model_validator

from ..common.datetime_utils import to_local_naive
from ..core.enums import AbsensiStatus, JenisPengajuan
from ..rpc.schemas import Schema

# Browser clients send UTC ("...Z"); stored times are naive local time.
LocalDateTime = Annotated[datetime, AfterValidator(to_local_naive)]


# ---- Student actions ----
class AbsenMasukInput(Schema):
    siswa_id: int
    kelas_id: int


class AbsenPulangInput(Schema):
    absensi_id: int


class PengajuanIzinInput(Schema):
    siswa_id: int
    kelas_id: int
    tanggal: date
    status: JenisPengajuan
    keterangan: str = Field(min_length=1)


# ---- Teacher/admin actions ----
class CreateAbsensiInput(Schema):
    siswa_id: int
    kelas_id: int
    status: AbsensiStatus
    tanggal: date
    guru_id: Optional[int] = None
    waktu_masuk: Optional[LocalDateTime] = None
    waktu_pulang: Optional[LocalDateTime] = None
    keterangan: Optional[str] = None


class BulkRecordInput(Schema):
    records: list[CreateAbsensiInput]


class VerifikasiIzinInput(Schema):
    absensi_id: int
    guru_id: int
    status: AbsensiStatus


class UpdateAbsensiInput(Schema):
    id: int
    status: Optional[AbsensiStatus] = None
    waktu_masuk: Optional[LocalDateTime] = None
    waktu_pulang: Optional[LocalDateTime] = None
    keterangan: Optional[str] = None
    guru_id: Optional[int] = None


# ---- Queries ----
class ByClassInput(Schema):
    kelas_id: int = Field(alias="kelasId")
    tanggal: date = Field(alias="date")


class BySiswaInput(Schema):
    siswa_id: int = Field(alias="siswaId")
    limit: Optional[int] = Field(default=None, ge=1)


class ByStudentInput(Schema):
    siswa_id: int = Field(alias="siswaId")
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")


class DateRange(Schema):
    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self):
        if self.start > self.end:
            raise ValueError("start harus <= end")
        return self


class StatsInput(Schema):
    kelas_id: Optional[int] = Field(default=None, alias="kelasId")
    date_range: Optional[DateRange] = Field(default=None, alias="dateRange")
