from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access control."""

    ADMIN = "admin"
    GURU = "guru"
    SISWA = "siswa"


class AbsensiStatus(str, Enum):
    """Daily attendance status stored in the database."""

    HADIR = "hadir"
    IZIN = "izin"
    SAKIT = "sakit"
    ALPHA = "alpha"
    PENDING = "pending"


class JenisPengajuan(str, Enum):
    """Kind of absence a student applies for."""

    IZIN = "izin"
    SAKIT = "sakit"

    def as_status(self) -> AbsensiStatus:
        return AbsensiStatus(self.value)


class LeaveRequestStatus(str, Enum):
    """Approval workflow state of a multi-day leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class ExportFormat(str, Enum):
    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"
