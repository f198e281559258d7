from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .absensi.factory import PunctualityStrategyFactory
from .absensi.mysql_absensi_repository import MySQLAbsensiRepository
from .absensi.service import AbsensiService
from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.service import AssignmentService
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .guru.mysql_guru_repository import MySQLGuruRepository
from .guru.service import GuruService
from .kelas.mysql_kelas_repository import MySQLKelasRepository
from .kelas.service import KelasService
from .leave_requests.mysql_leave_request_repository import MySQLLeaveRequestRepository
from .leave_requests.service import LeaveRequestService
from .reports.service import ReportService
from .siswa.mysql_siswa_repository import MySQLSiswaRepository
from .siswa.service import SiswaService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    guru_service: GuruService
    kelas_service: KelasService
    siswa_service: SiswaService
    assignment_service: AssignmentService
    absensi_service: AbsensiService
    leave_request_service: LeaveRequestService
    dashboard_service: DashboardService
    report_service: ReportService


def build_services(
    *,
    users_repo,
    guru_repo,
    kelas_repo,
    siswa_repo,
    assignments_repo,
    absensi_repo,
    leave_requests_repo,
    school_start: Optional[time] = None,
    school_end: Optional[time] = None,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""

    return Container(
        auth_service=AuthService(users_repo, guru_repo, siswa_repo),
        user_service=UserService(users_repo, guru_repo, siswa_repo),
        guru_service=GuruService(guru_repo, users_repo),
        kelas_service=KelasService(kelas_repo, guru_repo, assignments_repo),
        siswa_service=SiswaService(siswa_repo, users_repo, kelas_repo),
        assignment_service=AssignmentService(assignments_repo, guru_repo, kelas_repo),
        absensi_service=AbsensiService(
            absensi_repo,
            siswa_repo,
            kelas_repo,
            guru_repo,
            assignments_repo,
            strategy_factory=PunctualityStrategyFactory(),
            school_start=school_start,
            school_end=school_end,
            grace_minutes=grace_minutes,
        ),
        leave_request_service=LeaveRequestService(leave_requests_repo, siswa_repo, absensi_repo, guru_repo, users_repo),
        dashboard_service=DashboardService(siswa_repo, guru_repo, kelas_repo, absensi_repo),
        report_service=ReportService(absensi_repo, siswa_repo, kelas_repo),
    )


def build_container(
    *,
    db_config: dict,
    school_start: Optional[time] = None,
    school_end: Optional[time] = None,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        guru_repo=MySQLGuruRepository(conn),
        kelas_repo=MySQLKelasRepository(conn),
        siswa_repo=MySQLSiswaRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        absensi_repo=MySQLAbsensiRepository(conn),
        leave_requests_repo=MySQLLeaveRequestRepository(conn),
        school_start=school_start,
        school_end=school_end,
        grace_minutes=grace_minutes,
    )
