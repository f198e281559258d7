from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..assignments.repository import AssignmentRepository
from ..common.datetime_utils import now_local, percent, to_local_naive
from ..common.validators import optional_stripped, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AbsensiStatus, JenisPengajuan
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..guru.repository import GuruRepository
from ..kelas.repository import KelasRepository
from ..siswa.model import Siswa
from ..siswa.repository import SiswaRepository
from .factory import PunctualityStrategyFactory
from .model import Absensi, AbsensiFilter, NewAbsensi
from .repository import AbsensiRepository

# Statuses a guru may give a pending izin/sakit application.
VERIFICATION_STATUSES = (AbsensiStatus.IZIN, AbsensiStatus.SAKIT, AbsensiStatus.ALPHA)


def _append_note(current: Optional[str], note: Optional[str]) -> Optional[str]:
    if not note:
        return current
    return f"{current}; {note}" if current else note


class AbsensiService:
    def __init__(
        self,
        absensi: AbsensiRepository,
        siswas: SiswaRepository,
        kelas: KelasRepository,
        gurus: GuruRepository,
        assignments: AssignmentRepository,
        *,
        strategy_factory: PunctualityStrategyFactory | None = None,
        school_start: time | None = None,
        school_end: time | None = None,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    ):
        self._absensi = absensi
        self._siswas = siswas
        self._kelas = kelas
        self._gurus = gurus
        self._assignments = assignments
        self._factory = strategy_factory or PunctualityStrategyFactory()
        self._school_start = school_start
        self._school_end = school_end
        self._grace_minutes = int(grace_minutes)

    # ---- helpers ----
    def _require_member(self, siswa_id: int, kelas_id: int) -> Siswa:
        siswa = self._siswas.get_by_id(int(siswa_id))
        if not siswa or siswa.kelas_id != int(kelas_id):
            raise NotFoundError("Siswa tidak ditemukan atau bukan anggota kelas ini")
        return siswa

    def _require_free_day(self, siswa_id: int, tanggal: date, message: str) -> None:
        if self._absensi.get_for_siswa_and_date(int(siswa_id), tanggal):
            raise ValidationError(message)

    def _require_record(self, absensi_id: int) -> Absensi:
        record = self._absensi.get_by_id(int(absensi_id))
        if not record:
            raise NotFoundError("Data absensi tidak ditemukan")
        return record

    @staticmethod
    def _check_times(waktu_masuk: Optional[datetime], waktu_pulang: Optional[datetime]) -> None:
        if waktu_masuk and waktu_pulang and waktu_pulang < waktu_masuk:
            raise ValidationError("Waktu pulang tidak boleh lebih awal dari waktu masuk")

    def _reload(self, absensi_id: int) -> Absensi:
        record = self._absensi.get_by_id(int(absensi_id))
        if not record:
            raise ValidationError("Gagal menyimpan absensi")
        return record

    def _validate_new(self, record: NewAbsensi) -> NewAbsensi:
        record = replace(
            record,
            waktu_masuk=to_local_naive(record.waktu_masuk),
            waktu_pulang=to_local_naive(record.waktu_pulang),
        )
        self._require_member(record.siswa_id, record.kelas_id)
        if record.guru_id is not None and not self._gurus.get_by_id(int(record.guru_id)):
            raise NotFoundError("Guru tidak ditemukan")
        self._check_times(record.waktu_masuk, record.waktu_pulang)
        self._require_free_day(record.siswa_id, record.tanggal, "Absensi siswa untuk tanggal ini sudah ada")
        return replace(record, keterangan=optional_stripped(record.keterangan))

    # ---- student actions ----
    def absen_masuk(self, *, siswa_id: int, kelas_id: int, now: datetime | None = None) -> Absensi:
        now = now or now_local()
        today = now.date()

        self._require_member(siswa_id, kelas_id)
        self._require_free_day(siswa_id, today, "Absensi hari ini sudah tercatat")

        strategy = self._factory.for_checkin(
            now=now, today=today, school_start=self._school_start, grace_minutes=self._grace_minutes
        )
        decision = strategy.decide_checkin(
            now=now, today=today, school_start=self._school_start, grace_minutes=self._grace_minutes
        )

        absensi_id = self._absensi.create(
            NewAbsensi(
                siswa_id=int(siswa_id),
                kelas_id=int(kelas_id),
                status=decision.status,
                tanggal=today,
                waktu_masuk=now,
                keterangan=decision.note,
            )
        )
        return self._reload(absensi_id)

    def absen_pulang(self, *, absensi_id: int, now: datetime | None = None) -> Absensi:
        now = now or now_local()
        today = now.date()

        record = self._require_record(absensi_id)
        if record.tanggal != today:
            raise ValidationError("Absen pulang hanya untuk absensi hari ini")
        if record.status != AbsensiStatus.HADIR:
            raise ValidationError("Absen pulang hanya untuk status hadir")
        if record.waktu_masuk is None:
            raise ValidationError("Belum absen masuk hari ini")
        if record.waktu_pulang is not None:
            raise ValidationError("Sudah absen pulang hari ini")

        strategy = self._factory.for_checkout(
            now=now, today=today, school_end=self._school_end, current_status=record.status
        )
        decision = strategy.decide_checkout(now=now, today=today, school_end=self._school_end, current=record.status)

        self._absensi.update(
            record.id,
            fields={
                "waktu_pulang": now,
                "status": decision.status,
                "keterangan": _append_note(record.keterangan, decision.note),
            },
        )
        return self._reload(record.id)

    def pengajuan_izin(
        self,
        *,
        siswa_id: int,
        kelas_id: int,
        tanggal: date,
        jenis: JenisPengajuan,
        keterangan: str,
    ) -> Absensi:
        keterangan = require_non_empty(keterangan, "Keterangan")
        self._require_member(siswa_id, kelas_id)
        self._require_free_day(siswa_id, tanggal, "Absensi untuk tanggal ini sudah ada")

        absensi_id = self._absensi.create(
            NewAbsensi(
                siswa_id=int(siswa_id),
                kelas_id=int(kelas_id),
                status=AbsensiStatus.PENDING,
                tanggal=tanggal,
                keterangan=keterangan,
                jenis_pengajuan=JenisPengajuan(jenis),
            )
        )
        return self._reload(absensi_id)

    # ---- teacher/admin actions ----
    def create(self, record: NewAbsensi) -> Absensi:
        absensi_id = self._absensi.create(self._validate_new(record))
        return self._reload(absensi_id)

    def bulk_record(self, records: Sequence[NewAbsensi]) -> list[Absensi]:
        if not records:
            return []

        # Validate everything first so a bad row inserts nothing.
        seen: set[tuple[int, date]] = set()
        validated: list[NewAbsensi] = []
        for r in records:
            key = (int(r.siswa_id), r.tanggal)
            if key in seen:
                raise ValidationError(f"Siswa {r.siswa_id} tercatat lebih dari sekali untuk {r.tanggal.isoformat()}")
            seen.add(key)
            validated.append(self._validate_new(r))

        ids = self._absensi.create_many(validated)
        return [self._reload(i) for i in ids]

    def verifikasi_izin(self, *, absensi_id: int, guru_id: int, status: AbsensiStatus) -> Absensi:
        status = AbsensiStatus(status)
        if status not in VERIFICATION_STATUSES:
            raise ValidationError("Status verifikasi harus izin, sakit, atau alpha")

        record = self._require_record(absensi_id)
        if record.status != AbsensiStatus.PENDING:
            raise ValidationError("Hanya pengajuan berstatus pending yang dapat diverifikasi")

        guru = self._gurus.get_by_id(int(guru_id))
        if not guru:
            raise NotFoundError("Guru tidak ditemukan")
        kelas = self._kelas.get_by_id(record.kelas_id)
        is_wali = kelas is not None and kelas.wali_kelas_id == guru.id
        if not is_wali and not self._assignments.get(guru_id=guru.id, kelas_id=record.kelas_id):
            raise AuthorizationError("Guru bukan wali kelas atau pengajar kelas ini")

        self._absensi.update(record.id, fields={"status": status, "guru_id": guru.id})
        return self._reload(record.id)

    def update(
        self,
        absensi_id: int,
        *,
        status: Optional[AbsensiStatus] = None,
        waktu_masuk: Optional[datetime] = None,
        waktu_pulang: Optional[datetime] = None,
        keterangan: Optional[str] = None,
        guru_id: Optional[int] = None,
    ) -> Optional[Absensi]:
        record = self._absensi.get_by_id(int(absensi_id))
        if not record:
            return None

        fields: dict = {}
        if status is not None:
            fields["status"] = AbsensiStatus(status)
        if waktu_masuk is not None:
            fields["waktu_masuk"] = to_local_naive(waktu_masuk)
        if waktu_pulang is not None:
            fields["waktu_pulang"] = to_local_naive(waktu_pulang)
        if keterangan is not None:
            fields["keterangan"] = optional_stripped(keterangan)
        if guru_id is not None:
            if not self._gurus.get_by_id(int(guru_id)):
                raise NotFoundError("Guru tidak ditemukan")
            fields["guru_id"] = int(guru_id)

        self._check_times(fields.get("waktu_masuk", record.waktu_masuk), fields.get("waktu_pulang", record.waktu_pulang))

        if fields and not self._absensi.update(record.id, fields=fields):
            return None
        return self._absensi.get_by_id(record.id)

    def delete(self, absensi_id: int) -> bool:
        return self._absensi.delete_by_id(int(absensi_id))

    # ---- queries ----
    def get_by_filter(self, flt: AbsensiFilter) -> Sequence[Absensi]:
        if flt.start_date and flt.end_date and flt.start_date > flt.end_date:
            raise ValidationError("Tanggal mulai harus sebelum atau sama dengan tanggal akhir")
        return self._absensi.find(flt)

    def get_hari_ini(self, kelas_id: Optional[int] = None, *, today: date | None = None) -> Sequence[Absensi]:
        today = today or now_local().date()
        return self._absensi.find(AbsensiFilter(kelas_id=kelas_id, start_date=today, end_date=today))

    def get_by_class(self, kelas_id: int, tanggal: date) -> Sequence[Absensi]:
        if not self._kelas.get_by_id(int(kelas_id)):
            raise NotFoundError("Kelas tidak ditemukan")
        return self._absensi.find(AbsensiFilter(kelas_id=int(kelas_id), start_date=tanggal, end_date=tanggal))

    def get_by_siswa(self, siswa_id: int, limit: Optional[int] = None) -> Sequence[Absensi]:
        return self._absensi.find(AbsensiFilter(siswa_id=int(siswa_id)), limit=limit or DEFAULT_HISTORY_LIMIT)

    def get_by_student(
        self,
        siswa_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[Absensi]:
        if not self._siswas.get_by_id(int(siswa_id)):
            raise NotFoundError("Siswa tidak ditemukan")
        return self.get_by_filter(AbsensiFilter(siswa_id=int(siswa_id), start_date=start_date, end_date=end_date))

    def get_pending_izin(self, kelas_id: Optional[int] = None) -> Sequence[Absensi]:
        return self._absensi.find(AbsensiFilter(kelas_id=kelas_id, status=AbsensiStatus.PENDING))

    def get_stats(
        self,
        kelas_id: Optional[int] = None,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        counts = self._absensi.count_by_status(
            AbsensiFilter(kelas_id=kelas_id, start_date=start_date, end_date=end_date)
        )
        total = sum(counts.values())
        return {
            "total": total,
            "hadir": counts[AbsensiStatus.HADIR.value],
            "izin": counts[AbsensiStatus.IZIN.value],
            "sakit": counts[AbsensiStatus.SAKIT.value],
            "alpha": counts[AbsensiStatus.ALPHA.value],
            "pending": counts[AbsensiStatus.PENDING.value],
            "persentase_kehadiran": percent(counts[AbsensiStatus.HADIR.value], total),
        }
