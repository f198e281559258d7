from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Optional, Sequence

from ..absensi.model import Absensi, AbsensiFilter
from ..absensi.repository import AbsensiRepository
from ..common.datetime_utils import is_school_day, iter_days, month_bounds, now_local, percent
from ..core.constants import BELUM_ABSEN, DEFAULT_REPORT_DAYS, WEEK_DAYS
from ..core.enums import AbsensiStatus, ExportFormat, ReportType
from ..core.exceptions import NotFoundError, ValidationError
from ..kelas.model import Kelas
from ..kelas.repository import KelasRepository
from ..siswa.model import Siswa
from ..siswa.repository import SiswaRepository
from .exporters import ExportedFile, get_exporter

# Statuses that count as a decided day (pending applications are left out of rates).
_DECIDED = (AbsensiStatus.HADIR, AbsensiStatus.IZIN, AbsensiStatus.SAKIT, AbsensiStatus.ALPHA)


def _empty_counts() -> dict[str, int]:
    return {s.value: 0 for s in AbsensiStatus}


def _decided_total(counts: dict[str, int]) -> int:
    return sum(counts[s.value] for s in _DECIDED)


def _average(values: Sequence[int]) -> int:
    return int(sum(values) / len(values) + 0.5) if values else 0


class ReportService:
    def __init__(self, absensi: AbsensiRepository, siswas: SiswaRepository, kelas: KelasRepository):
        self._absensi = absensi
        self._siswas = siswas
        self._kelas = kelas

    # ---- scope helpers ----
    def _require_kelas(self, kelas_id: int) -> Kelas:
        kelas = self._kelas.get_by_id(int(kelas_id))
        if not kelas:
            raise NotFoundError("Kelas tidak ditemukan")
        return kelas

    def _students(self, *, kelas_id: Optional[int] = None, siswa_id: Optional[int] = None) -> list[Siswa]:
        if siswa_id is not None:
            siswa = self._siswas.get_by_id(int(siswa_id))
            if not siswa:
                raise NotFoundError("Siswa tidak ditemukan")
            if kelas_id is not None and siswa.kelas_id != int(kelas_id):
                return []
            return [siswa]
        if kelas_id is not None:
            return list(self._siswas.list_by_kelas([int(kelas_id)]))
        return list(self._siswas.list_all())

    def _counts_by_siswa(self, records: Sequence[Absensi]) -> dict[int, dict[str, int]]:
        out: dict[int, dict[str, int]] = defaultdict(_empty_counts)
        for r in records:
            out[r.siswa_id][r.status.value] += 1
        return out

    def _scope_header(self, kelas_id: Optional[int]) -> dict:
        if kelas_id is None:
            return {}
        return {"kelas": self._require_kelas(kelas_id).nama_kelas}

    # ---- reports ----
    def generate_attendance(self, flt: AbsensiFilter, *, today: date | None = None) -> dict:
        """Per-student totals for a period (default: the last DEFAULT_REPORT_DAYS days)."""
        end = flt.end_date or (today or now_local().date())
        start = flt.start_date or (end - timedelta(days=DEFAULT_REPORT_DAYS - 1))
        if start > end:
            raise ValidationError("Tanggal mulai harus sebelum atau sama dengan tanggal akhir")

        students = self._students(kelas_id=flt.kelas_id, siswa_id=flt.siswa_id)
        records = self._absensi.find(
            AbsensiFilter(
                kelas_id=flt.kelas_id,
                siswa_id=flt.siswa_id,
                start_date=start,
                end_date=end,
                status=flt.status,
            )
        )
        by_siswa = self._counts_by_siswa(records)

        data = []
        for s in students:
            counts = by_siswa.get(s.id, _empty_counts())
            data.append(
                {
                    "siswa_id": s.id,
                    "siswa_nama": s.nama,
                    "nisn": s.nisn,
                    "kelas": s.nama_kelas or "-",
                    "total_hadir": counts["hadir"],
                    "total_izin": counts["izin"],
                    "total_sakit": counts["sakit"],
                    "total_alpha": counts["alpha"],
                    "persentase_kehadiran": percent(counts["hadir"], _decided_total(counts)),
                }
            )

        return {
            "data": data,
            "summary": {
                "total_siswa": len(data),
                "rata_rata_kehadiran": _average([row["persentase_kehadiran"] for row in data]),
                "periode": {"start": start, "end": end},
            },
        }

    def get_summary(self, flt: AbsensiFilter) -> dict:
        """Status totals plus one line per class."""
        records = self._absensi.find(flt)
        totals = _empty_counts()
        by_kelas: dict[int, dict[str, int]] = defaultdict(_empty_counts)
        for r in records:
            totals[r.status.value] += 1
            by_kelas[r.kelas_id][r.status.value] += 1

        if flt.kelas_id is not None:
            kelas_list = [self._require_kelas(flt.kelas_id)]
        else:
            kelas_list = list(self._kelas.list_all())

        per_kelas = []
        for k in kelas_list:
            counts = by_kelas.get(k.id, _empty_counts())
            per_kelas.append(
                {
                    "kelas_id": k.id,
                    "nama_kelas": k.nama_kelas,
                    "total_siswa": self._siswas.count([k.id]),
                    "total_absensi": sum(counts.values()),
                    "persentase_kehadiran": percent(counts["hadir"], _decided_total(counts)),
                }
            )

        return {
            "total": sum(totals.values()),
            **totals,
            "persentase_kehadiran": percent(totals["hadir"], _decided_total(totals)),
            "per_kelas": per_kelas,
        }

    def generate_daily(self, tanggal: date, kelas_id: Optional[int] = None) -> dict:
        header = self._scope_header(kelas_id)
        students = self._students(kelas_id=kelas_id)
        records = {
            r.siswa_id: r
            for r in self._absensi.find(AbsensiFilter(kelas_id=kelas_id, start_date=tanggal, end_date=tanggal))
        }

        summary = {"total_siswa": len(students), **_empty_counts(), BELUM_ABSEN: 0}
        rows = []
        for s in students:
            r = records.get(s.id)
            status = r.status.value if r else BELUM_ABSEN
            summary[status] += 1
            rows.append(
                {
                    "siswa_id": s.id,
                    "nama": s.nama,
                    "nisn": s.nisn,
                    "status": status,
                    "waktu_masuk": r.waktu_masuk.strftime("%H:%M") if r and r.waktu_masuk else None,
                    "waktu_pulang": r.waktu_pulang.strftime("%H:%M") if r and r.waktu_pulang else None,
                    "keterangan": r.keterangan if r else None,
                }
            )

        return {"tanggal": tanggal, **header, "siswa": rows, "summary": summary}

    def generate_weekly(self, start_date: date, kelas_id: Optional[int] = None) -> dict:
        header = self._scope_header(kelas_id)
        end_date = start_date + timedelta(days=WEEK_DAYS - 1)
        records = self._absensi.find(AbsensiFilter(kelas_id=kelas_id, start_date=start_date, end_date=end_date))

        by_day: dict[date, dict[str, int]] = defaultdict(_empty_counts)
        for r in records:
            by_day[r.tanggal][r.status.value] += 1

        totals = _empty_counts()
        daily_summary = []
        for day in iter_days(start_date, end_date):
            counts = by_day.get(day, _empty_counts())
            for key, value in counts.items():
                totals[key] += value
            daily_summary.append(
                {
                    "tanggal": day,
                    "hadir": counts["hadir"],
                    "izin": counts["izin"],
                    "sakit": counts["sakit"],
                    "alpha": counts["alpha"],
                    "total": _decided_total(counts),
                }
            )

        return {
            "periode": {"start": start_date, "end": end_date},
            **header,
            "daily_summary": daily_summary,
            "overall_summary": {
                "total_siswa": len(self._students(kelas_id=kelas_id)),
                "rata_rata_kehadiran": percent(totals["hadir"], _decided_total(totals)),
                "total_hadir": totals["hadir"],
                "total_izin": totals["izin"],
                "total_sakit": totals["sakit"],
                "total_alpha": totals["alpha"],
            },
        }

    def generate_monthly(self, year: int, month: int, kelas_id: Optional[int] = None) -> dict:
        """Per-student summary over the month's school days (Monday to Friday)."""
        if not 1 <= int(month) <= 12:
            raise ValidationError("Bulan harus antara 1 dan 12")
        header = self._scope_header(kelas_id)
        first, last = month_bounds(int(year), int(month))
        effective_days = sum(1 for d in iter_days(first, last) if is_school_day(d))

        students = self._students(kelas_id=kelas_id)
        records = [
            r
            for r in self._absensi.find(AbsensiFilter(kelas_id=kelas_id, start_date=first, end_date=last))
            if is_school_day(r.tanggal)
        ]
        by_siswa = self._counts_by_siswa(records)

        totals = _empty_counts()
        rows = []
        for s in students:
            counts = by_siswa.get(s.id, _empty_counts())
            for key, value in counts.items():
                totals[key] += value
            rows.append(
                {
                    "siswa_id": s.id,
                    "nama": s.nama,
                    "nisn": s.nisn,
                    "hadir": counts["hadir"],
                    "izin": counts["izin"],
                    "sakit": counts["sakit"],
                    "alpha": counts["alpha"],
                    "total_hari_efektif": effective_days,
                    "persentase_kehadiran": percent(counts["hadir"], effective_days),
                }
            )

        return {
            "periode": {"tahun": int(year), "bulan": int(month)},
            **header,
            "siswa_summary": rows,
            "overall_summary": {
                "total_siswa": len(rows),
                "total_hari_efektif": effective_days,
                "rata_rata_kehadiran": _average([row["persentase_kehadiran"] for row in rows]),
                "total_hadir": totals["hadir"],
                "total_izin": totals["izin"],
                "total_sakit": totals["sakit"],
                "total_alpha": totals["alpha"],
            },
        }

    # ---- exports ----
    def export_report(
        self,
        report_data,
        report_type: ReportType,
        fmt: ExportFormat,
        *,
        today: date | None = None,
    ) -> ExportedFile:
        exporter = get_exporter(ExportFormat(fmt))
        return exporter.export(report_data, ReportType(report_type), today=today or now_local().date())

    def export(self, fmt: ExportFormat, flt: AbsensiFilter, *, today: date | None = None) -> ExportedFile:
        report = self.generate_attendance(flt, today=today)
        return self.export_report(report, ReportType.CUSTOM, fmt, today=today)
