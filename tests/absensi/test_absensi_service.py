from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.absenku.absenku.absensi.model import AbsensiFilter, NewAbsensi
from src.absenku.absenku.core.enums import AbsensiStatus, JenisPengajuan
from src.absenku.absenku.core.exceptions import AuthorizationError, NotFoundError, ValidationError


# ---- absen masuk / pulang ----
def test_absen_masuk_on_time(container, school, fixed_now):
    record = container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=fixed_now)

    assert record.status == AbsensiStatus.HADIR
    assert record.tanggal == fixed_now.date()
    assert record.waktu_masuk == fixed_now
    assert record.keterangan is None
    assert record.siswa_nama == "Siti Aminah"


def test_absen_masuk_late_adds_note(container, school):
    now = datetime(2026, 3, 2, 7, 32, 0)

    record = container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=now)

    assert record.status == AbsensiStatus.HADIR
    assert record.keterangan == "Terlambat 32 menit"


def test_absen_masuk_twice_same_day_is_rejected(container, school, fixed_now):
    container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=fixed_now)

    with pytest.raises(ValidationError) as exc:
        container.absensi_service.absen_masuk(
            siswa_id=school.siti.id, kelas_id=school.kelas.id, now=fixed_now + timedelta(minutes=1)
        )
    assert str(exc.value) == "Absensi hari ini sudah tercatat"


def test_absen_masuk_wrong_kelas(container, school, fixed_now):
    with pytest.raises(NotFoundError):
        container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.other_kelas.id, now=fixed_now)


def test_absen_pulang_normal_and_early(container, school):
    morning = datetime(2026, 3, 2, 7, 30, 0)
    siti = container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=morning)
    andi = container.absensi_service.absen_masuk(siswa_id=school.andi.id, kelas_id=school.kelas.id, now=morning)

    early = container.absensi_service.absen_pulang(absensi_id=siti.id, now=datetime(2026, 3, 2, 12, 0))
    normal = container.absensi_service.absen_pulang(absensi_id=andi.id, now=datetime(2026, 3, 2, 14, 5))

    assert early.waktu_pulang == datetime(2026, 3, 2, 12, 0)
    assert early.keterangan == "Terlambat 30 menit; Pulang lebih awal"
    assert normal.keterangan == "Terlambat 30 menit"
    assert normal.status == AbsensiStatus.HADIR


def test_absen_pulang_twice_is_rejected(container, school, fixed_now):
    record = container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=fixed_now)
    container.absensi_service.absen_pulang(absensi_id=record.id, now=fixed_now.replace(hour=14, minute=30))

    with pytest.raises(ValidationError):
        container.absensi_service.absen_pulang(absensi_id=record.id, now=fixed_now.replace(hour=15))


def test_absen_pulang_only_for_today(container, school, fixed_now):
    record = container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=fixed_now)

    with pytest.raises(ValidationError):
        container.absensi_service.absen_pulang(absensi_id=record.id, now=fixed_now + timedelta(days=1))


# ---- pengajuan izin / verifikasi ----
def test_pengajuan_izin_creates_pending_record(container, school):
    record = container.absensi_service.pengajuan_izin(
        siswa_id=school.siti.id,
        kelas_id=school.kelas.id,
        tanggal=date(2026, 3, 3),
        jenis=JenisPengajuan.SAKIT,
        keterangan="Demam",
    )

    assert record.status == AbsensiStatus.PENDING
    assert record.jenis_pengajuan == JenisPengajuan.SAKIT
    assert [r.id for r in container.absensi_service.get_pending_izin(school.kelas.id)] == [record.id]


def test_pengajuan_izin_requires_keterangan(container, school):
    with pytest.raises(ValidationError):
        container.absensi_service.pengajuan_izin(
            siswa_id=school.siti.id,
            kelas_id=school.kelas.id,
            tanggal=date(2026, 3, 3),
            jenis=JenisPengajuan.IZIN,
            keterangan="   ",
        )


def test_wali_kelas_verifies_pending_izin(container, school):
    pending = container.absensi_service.pengajuan_izin(
        siswa_id=school.siti.id,
        kelas_id=school.kelas.id,
        tanggal=date(2026, 3, 3),
        jenis=JenisPengajuan.SAKIT,
        keterangan="Demam",
    )

    verified = container.absensi_service.verifikasi_izin(
        absensi_id=pending.id, guru_id=school.wali.id, status=AbsensiStatus.SAKIT
    )

    assert verified.status == AbsensiStatus.SAKIT
    assert verified.guru_id == school.wali.id
    assert verified.guru_nama == "Budi Santoso"

    with pytest.raises(ValidationError):
        container.absensi_service.verifikasi_izin(absensi_id=pending.id, guru_id=school.wali.id, status=AbsensiStatus.IZIN)


def test_unrelated_guru_cannot_verify(container, school):
    pending = container.absensi_service.pengajuan_izin(
        siswa_id=school.siti.id,
        kelas_id=school.kelas.id,
        tanggal=date(2026, 3, 3),
        jenis=JenisPengajuan.IZIN,
        keterangan="Acara keluarga",
    )

    with pytest.raises(AuthorizationError):
        container.absensi_service.verifikasi_izin(
            absensi_id=pending.id, guru_id=school.other_guru.id, status=AbsensiStatus.IZIN
        )


def test_verification_cannot_mark_hadir(container, school):
    with pytest.raises(ValidationError):
        container.absensi_service.verifikasi_izin(absensi_id=1, guru_id=school.wali.id, status=AbsensiStatus.HADIR)


# ---- bulk / manual edits ----
def test_bulk_record_is_all_or_nothing(container, repos, school):
    tanggal = date(2026, 3, 2)
    records = [
        NewAbsensi(siswa_id=school.siti.id, kelas_id=school.kelas.id, status=AbsensiStatus.HADIR, tanggal=tanggal),
        NewAbsensi(siswa_id=school.andi.id, kelas_id=school.kelas.id, status=AbsensiStatus.ALPHA, tanggal=tanggal),
        NewAbsensi(siswa_id=school.siti.id, kelas_id=school.kelas.id, status=AbsensiStatus.IZIN, tanggal=tanggal),
    ]

    with pytest.raises(ValidationError):
        container.absensi_service.bulk_record(records)
    assert repos.absensi.find(AbsensiFilter()) == []

    created = container.absensi_service.bulk_record(records[:2])
    assert [r.status for r in created] == [AbsensiStatus.HADIR, AbsensiStatus.ALPHA]


def test_bulk_record_empty_is_noop(container):
    assert container.absensi_service.bulk_record([]) == []


def test_create_rejects_checkout_before_checkin(container, school):
    with pytest.raises(ValidationError):
        container.absensi_service.create(
            NewAbsensi(
                siswa_id=school.siti.id,
                kelas_id=school.kelas.id,
                status=AbsensiStatus.HADIR,
                tanggal=date(2026, 3, 2),
                waktu_masuk=datetime(2026, 3, 2, 10, 0),
                waktu_pulang=datetime(2026, 3, 2, 9, 0),
            )
        )


def test_update_and_delete(container, repos, school):
    record = repos.add_absensi(school.siti, date(2026, 3, 2), AbsensiStatus.ALPHA)

    updated = container.absensi_service.update(record.id, status=AbsensiStatus.HADIR, keterangan=" Salah input ")
    assert updated.status == AbsensiStatus.HADIR
    assert updated.keterangan == "Salah input"

    assert container.absensi_service.update(404, status=AbsensiStatus.HADIR) is None
    assert container.absensi_service.delete(record.id) is True
    assert container.absensi_service.delete(record.id) is False


def test_update_accepts_utc_checkout_time(container, school, fixed_now):
    record = container.absensi_service.absen_masuk(siswa_id=school.siti.id, kelas_id=school.kelas.id, now=fixed_now)
    pulang = datetime(2026, 3, 2, 23, 59, tzinfo=timezone.utc)

    updated = container.absensi_service.update(record.id, waktu_pulang=pulang)

    assert updated.waktu_pulang.tzinfo is None
    assert updated.waktu_pulang == pulang.astimezone().replace(tzinfo=None)


# ---- queries ----
def test_get_hari_ini_and_by_class(container, repos, school, fixed_now):
    today = fixed_now.date()
    repos.add_absensi(school.siti, today, AbsensiStatus.HADIR)
    repos.add_absensi(school.budi, today, AbsensiStatus.SAKIT)
    repos.add_absensi(school.andi, today - timedelta(days=1), AbsensiStatus.HADIR)

    assert len(container.absensi_service.get_hari_ini(today=today)) == 2
    assert [r.siswa_id for r in container.absensi_service.get_hari_ini(school.kelas.id, today=today)] == [school.siti.id]
    assert len(container.absensi_service.get_by_class(school.kelas.id, today - timedelta(days=1))) == 1

    with pytest.raises(NotFoundError):
        container.absensi_service.get_by_class(404, today)


def test_get_by_siswa_newest_first_with_limit(container, repos, school):
    for day in range(2, 7):
        repos.add_absensi(school.siti, date(2026, 3, day), AbsensiStatus.HADIR)

    history = container.absensi_service.get_by_siswa(school.siti.id, limit=3)

    assert [r.tanggal.day for r in history] == [6, 5, 4]


def test_get_by_filter_rejects_inverted_range(container):
    with pytest.raises(ValidationError):
        container.absensi_service.get_by_filter(AbsensiFilter(start_date=date(2026, 3, 5), end_date=date(2026, 3, 1)))


def test_get_stats(container, repos, school):
    repos.add_absensi(school.siti, date(2026, 3, 2), AbsensiStatus.HADIR)
    repos.add_absensi(school.siti, date(2026, 3, 3), AbsensiStatus.HADIR)
    repos.add_absensi(school.siti, date(2026, 3, 4), AbsensiStatus.HADIR)
    repos.add_absensi(school.andi, date(2026, 3, 2), AbsensiStatus.SAKIT)
    repos.add_absensi(school.budi, date(2026, 3, 2), AbsensiStatus.ALPHA)

    stats = container.absensi_service.get_stats(school.kelas.id)

    assert stats == {
        "total": 4,
        "hadir": 3,
        "izin": 0,
        "sakit": 1,
        "alpha": 0,
        "pending": 0,
        "persentase_kehadiran": 75,
    }
