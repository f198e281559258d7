from __future__ import annotations

from datetime import date

from src.absenku.absenku.core.enums import AbsensiStatus

TODAY = date(2026, 3, 4)


def _seed_month(repos, school):
    repos.add_absensi(school.siti, date(2026, 3, 2), AbsensiStatus.HADIR)
    repos.add_absensi(school.siti, date(2026, 3, 3), AbsensiStatus.IZIN)
    repos.add_absensi(school.siti, TODAY, AbsensiStatus.HADIR)
    repos.add_absensi(school.andi, TODAY, AbsensiStatus.PENDING)
    repos.add_absensi(school.budi, TODAY, AbsensiStatus.ALPHA)
    # Previous month, outside the rate window.
    repos.add_absensi(school.budi, date(2026, 2, 27), AbsensiStatus.HADIR)


def test_admin_stats(container, repos, school):
    _seed_month(repos, school)

    stats = container.dashboard_service.get_stats_admin(today=TODAY)

    assert stats["total_siswa"] == 3
    assert stats["total_guru"] == 2
    assert stats["total_kelas"] == 2
    assert stats["absensi_hari_ini"] == {"hadir": 1, "izin": 0, "sakit": 0, "alpha": 1, "pending": 1}
    # 2 hadir out of 5 records this month
    assert stats["persentase_kehadiran"] == 40


def test_guru_stats_are_limited_to_wali_kelas(container, repos, school):
    _seed_month(repos, school)

    stats = container.dashboard_service.get_stats_guru(school.wali.id, today=TODAY)

    assert stats["total_siswa"] == 2
    assert stats["total_kelas"] == 1
    assert stats["total_guru"] == 1
    assert stats["absensi_hari_ini"]["hadir"] == 1
    assert stats["absensi_hari_ini"]["alpha"] == 0
    assert stats["persentase_kehadiran"] == 50


def test_guru_without_classes_gets_zeros(container, school):
    stats = container.dashboard_service.get_stats_guru(school.other_guru.id, today=TODAY)

    assert stats["total_siswa"] == 0
    assert stats["total_kelas"] == 0
    assert stats["persentase_kehadiran"] == 0
    assert set(stats["absensi_hari_ini"].values()) == {0}


def test_siswa_stats(container, repos, school):
    _seed_month(repos, school)

    siti = container.dashboard_service.get_stats_siswa(school.siti.id, today=TODAY)
    andi = container.dashboard_service.get_stats_siswa(school.andi.id, today=TODAY)

    assert siti == {
        "total_hadir": 2,
        "total_izin": 1,
        "total_sakit": 0,
        "total_alpha": 0,
        "persentase_kehadiran": 67,
        "absensi_bulan_ini": 3,
        "status_hari_ini": "hadir",
    }
    assert andi["status_hari_ini"] == "belum_absen"
    assert andi["persentase_kehadiran"] == 0
