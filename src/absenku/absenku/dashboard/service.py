from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..absensi.model import AbsensiFilter
from ..absensi.repository import AbsensiRepository
from ..common.datetime_utils import month_bounds, now_local, percent
from ..core.constants import BELUM_ABSEN
from ..core.enums import AbsensiStatus
from ..guru.repository import GuruRepository
from ..kelas.repository import KelasRepository
from ..siswa.repository import SiswaRepository


def _today_counts(counts: dict[str, int]) -> dict[str, int]:
    return {s.value: int(counts.get(s.value, 0)) for s in AbsensiStatus}


class DashboardService:
    """Per-role dashboard numbers: today's counts and this month's attendance rate."""

    def __init__(
        self,
        siswas: SiswaRepository,
        gurus: GuruRepository,
        kelas: KelasRepository,
        absensi: AbsensiRepository,
    ):
        self._siswas = siswas
        self._gurus = gurus
        self._kelas = kelas
        self._absensi = absensi

    def _scoped_stats(self, today: date, kelas_ids: Optional[Sequence[int]]) -> tuple[dict, int]:
        today_counts = self._absensi.count_by_status(
            AbsensiFilter(start_date=today, end_date=today, kelas_ids=kelas_ids)
        )
        first, last = month_bounds(today.year, today.month)
        month_counts = self._absensi.count_by_status(
            AbsensiFilter(start_date=first, end_date=last, kelas_ids=kelas_ids)
        )
        rate = percent(month_counts[AbsensiStatus.HADIR.value], sum(month_counts.values()))
        return _today_counts(today_counts), rate

    def get_stats_admin(self, *, today: date | None = None) -> dict:
        today = today or now_local().date()
        absensi_hari_ini, rate = self._scoped_stats(today, None)
        return {
            "total_siswa": self._siswas.count(),
            "total_guru": self._gurus.count(),
            "total_kelas": self._kelas.count(),
            "absensi_hari_ini": absensi_hari_ini,
            "persentase_kehadiran": rate,
        }

    def get_stats_guru(self, guru_id: int, *, today: date | None = None) -> dict:
        """Same numbers as the admin view, limited to the guru's wali-kelas classes."""
        today = today or now_local().date()
        kelas_ids = [k.id for k in self._kelas.list_by_wali_kelas(int(guru_id))]
        if not kelas_ids:
            return {
                "total_siswa": 0,
                "total_guru": 1,
                "total_kelas": 0,
                "absensi_hari_ini": {s.value: 0 for s in AbsensiStatus},
                "persentase_kehadiran": 0,
            }

        absensi_hari_ini, rate = self._scoped_stats(today, kelas_ids)
        return {
            "total_siswa": self._siswas.count(kelas_ids),
            "total_guru": 1,
            "total_kelas": len(kelas_ids),
            "absensi_hari_ini": absensi_hari_ini,
            "persentase_kehadiran": rate,
        }

    def get_stats_siswa(self, siswa_id: int, *, today: date | None = None) -> dict:
        today = today or now_local().date()
        siswa_id = int(siswa_id)

        counts = self._absensi.count_by_status(AbsensiFilter(siswa_id=siswa_id))
        hadir = counts[AbsensiStatus.HADIR.value]
        izin = counts[AbsensiStatus.IZIN.value]
        sakit = counts[AbsensiStatus.SAKIT.value]
        alpha = counts[AbsensiStatus.ALPHA.value]

        first, last = month_bounds(today.year, today.month)
        month_counts = self._absensi.count_by_status(
            AbsensiFilter(siswa_id=siswa_id, start_date=first, end_date=last)
        )

        today_record = self._absensi.get_for_siswa_and_date(siswa_id, today)
        if today_record is None or today_record.status == AbsensiStatus.PENDING:
            status_hari_ini = BELUM_ABSEN
        else:
            status_hari_ini = today_record.status.value

        return {
            "total_hadir": hadir,
            "total_izin": izin,
            "total_sakit": sakit,
            "total_alpha": alpha,
            "persentase_kehadiran": percent(hadir, hadir + izin + sakit + alpha),
            "absensi_bulan_ini": sum(month_counts.values()),
            "status_hari_ini": status_hari_ini,
        }
