"""
Pydantic schemas for report procedures.
"""

from datetime import date
from typing import Any, Optional

from pydantic import Field

from ..core.enums import ExportFormat, ReportType
from ..rpc.schemas import AttendanceFilter, Schema


class DailyReportInput(Schema):
    tanggal: date = Field(alias="date")
    kelas_id: Optional[int] = Field(default=None, alias="kelasId")


class WeeklyReportInput(Schema):
    start_date: date = Field(alias="startDate")
    kelas_id: Optional[int] = Field(default=None, alias="kelasId")


class MonthlyReportInput(Schema):
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)
    kelas_id: Optional[int] = Field(default=None, alias="kelasId")


class ExportReportInput(Schema):
    report_data: Any = Field(alias="reportData")
    report_type: ReportType = Field(alias="reportType")


class ExportInput(Schema):
    format: ExportFormat
    filter: AttendanceFilter = Field(default_factory=AttendanceFilter)
