from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ADMIN_ONLY, ANY_ROLE, STAFF
from ..rpc.schemas import GuruIdInput, SiswaIdInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.dashboard_service

    @rpc.query("dashboard.getStatsAdmin", roles=ADMIN_ONLY)
    def get_stats_admin():
        return service.get_stats_admin()

    @rpc.query("dashboard.getStatsGuru", input=GuruIdInput, roles=STAFF)
    def get_stats_guru(data: GuruIdInput):
        return service.get_stats_guru(data.guru_id)

    @rpc.query("dashboard.getStatsSiswa", input=SiswaIdInput, roles=ANY_ROLE)
    def get_stats_siswa(data: SiswaIdInput):
        return service.get_stats_siswa(data.siswa_id)
