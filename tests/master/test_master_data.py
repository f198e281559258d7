from __future__ import annotations

from datetime import date

import pytest

from src.absenku.absenku.absensi.model import AbsensiFilter
from src.absenku.absenku.core.enums import AbsensiStatus, Role
from src.absenku.absenku.core.exceptions import NotFoundError, ValidationError


# ---- guru ----
def test_guru_profile_requires_guru_role(container, repos):
    user_id = repos.add_user("siswa.x", "rahasia", Role.SISWA)

    with pytest.raises(ValidationError):
        container.guru_service.create(user_id=user_id, nip="1990", nama="Salah Role")


def test_guru_nip_must_be_unique(container, repos, school):
    user_id = repos.add_user("guru.baru", "rahasia", Role.GURU)

    with pytest.raises(ValidationError):
        container.guru_service.create(user_id=user_id, nip=school.wali.nip, nama="Kembar")


def test_guru_create_and_update_profile(container, repos):
    user_id = repos.add_user("guru.baru", "rahasia", Role.GURU)
    guru = container.guru_service.create(user_id=user_id, nip="1990", nama=" Dewi ", foto="  ")

    assert guru.nama == "Dewi"
    assert guru.foto is None

    updated = container.guru_service.update_profile(user_id=user_id, nama="Dewi Lestari", foto="dewi.png")
    assert updated.nama == "Dewi Lestari"
    assert updated.foto == "dewi.png"
    assert updated.nip == "1990"


def test_guru_update_profile_without_profile_raises(container, repos):
    user_id = repos.add_user("guru.baru", "rahasia", Role.GURU)

    with pytest.raises(NotFoundError):
        container.guru_service.update_profile(user_id=user_id, nama="X")


def test_guru_delete_clears_wali_kelas(container, repos, school):
    assert container.guru_service.delete(school.wali.id) is True

    assert repos.kelas.get_by_id(school.kelas.id).wali_kelas_id is None
    assert container.assignment_service.get_by_class(school.kelas.id) == []


# ---- siswa ----
def test_siswa_requires_existing_kelas(container, repos):
    user_id = repos.add_user("siswa.baru", "rahasia", Role.SISWA)

    with pytest.raises(NotFoundError):
        container.siswa_service.create(user_id=user_id, nisn="0099", nama="Tanpa Kelas", kelas_id=99)


def test_siswa_nisn_must_be_unique(container, repos, school):
    user_id = repos.add_user("siswa.baru", "rahasia", Role.SISWA)

    with pytest.raises(ValidationError):
        container.siswa_service.create(
            user_id=user_id, nisn=school.siti.nisn, nama="Kembar", kelas_id=school.kelas.id
        )


def test_siswa_get_by_kelas_and_nisn(container, school):
    names = [s.nama for s in container.siswa_service.get_by_kelas(school.kelas.id)]

    assert names == ["Andi Pratama", "Siti Aminah"]
    assert container.siswa_service.get_by_nisn(" 0051234569 ").nama == "Budi Hartono"


def test_siswa_move_to_other_kelas(container, school):
    moved = container.siswa_service.update(school.siti.id, kelas_id=school.other_kelas.id)

    assert moved.kelas_id == school.other_kelas.id
    assert moved.nama_kelas == "X IPA 2"


def test_siswa_update_unknown_returns_none(container, school):
    assert container.siswa_service.update(404, nama="X") is None


# ---- kelas ----
def test_kelas_name_must_be_unique(container, school):
    with pytest.raises(ValidationError):
        container.kelas_service.create(nama_kelas="X IPA 1")


def test_kelas_wali_must_exist(container, school):
    with pytest.raises(NotFoundError):
        container.kelas_service.create(nama_kelas="XI IPS 1", wali_kelas_id=404)


def test_kelas_update_keeps_wali_unless_given(container, school):
    renamed = container.kelas_service.update(school.kelas.id, nama_kelas="X MIPA 1")
    assert renamed.nama_kelas == "X MIPA 1"
    assert renamed.wali_kelas_id == school.wali.id
    assert renamed.wali_kelas_nama == "Budi Santoso"

    cleared = container.kelas_service.update(school.kelas.id, wali_kelas_id=None)
    assert cleared.wali_kelas_id is None
    assert [a.is_homeroom for a in container.assignment_service.get_by_class(school.kelas.id)] == [False]


def test_kelas_create_with_wali_records_homeroom_assignment(container, school):
    kelas = container.kelas_service.create(nama_kelas="XI IPS 1", wali_kelas_id=school.other_guru.id)

    rows = container.assignment_service.get_by_class(kelas.id)
    assert [(a.guru_id, a.is_homeroom) for a in rows] == [(school.other_guru.id, True)]


def test_kelas_change_wali_moves_homeroom_assignment(container, school):
    container.kelas_service.update(school.kelas.id, wali_kelas_id=school.other_guru.id)

    rows = container.assignment_service.get_by_class(school.kelas.id)
    homerooms = [a.guru_id for a in rows if a.is_homeroom]
    assert homerooms == [school.other_guru.id]
    assert {a.guru_id for a in rows} == {school.wali.id, school.other_guru.id}

    with pytest.raises(ValidationError):
        container.assignment_service.update(guru_id=school.wali.id, kelas_id=school.kelas.id, is_homeroom=True)


def test_kelas_list_reports_student_count(container, school):
    counts = {k.nama_kelas: k.jumlah_siswa for k in container.kelas_service.get_all()}

    assert counts == {"X IPA 1": 2, "X IPA 2": 1}


def test_kelas_by_teacher_includes_assigned_classes(container, school):
    container.assignment_service.assign(guru_id=school.other_guru.id, kelas_id=school.kelas.id)

    assert [k.nama_kelas for k in container.kelas_service.get_by_teacher(school.other_guru.id)] == ["X IPA 1"]
    assert container.kelas_service.get_by_wali_kelas(school.other_guru.id) == []


def test_kelas_delete_cascades(container, repos, school):
    repos.add_absensi(school.siti, date(2026, 3, 2), AbsensiStatus.HADIR)

    assert container.kelas_service.delete(school.kelas.id) is True

    assert repos.siswas.get_by_id(school.siti.id) is None
    assert repos.absensi.count_by_status(AbsensiFilter()) == {s.value: 0 for s in AbsensiStatus}
