from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ANY_ROLE, STAFF
from ..rpc.schemas import AttendanceFilter, IdInput, OptionalKelasIdInput
from .model import NewAbsensi
from .schemas import (
    AbsenMasukInput,
    AbsenPulangInput,
    BulkRecordInput,
    ByClassInput,
    BySiswaInput,
    ByStudentInput,
    CreateAbsensiInput,
    PengajuanIzinInput,
    StatsInput,
    UpdateAbsensiInput,
    VerifikasiIzinInput,
)


def to_new_absensi(data: CreateAbsensiInput) -> NewAbsensi:
    return NewAbsensi(
        siswa_id=data.siswa_id,
        kelas_id=data.kelas_id,
        status=data.status,
        tanggal=data.tanggal,
        guru_id=data.guru_id,
        waktu_masuk=data.waktu_masuk,
        waktu_pulang=data.waktu_pulang,
        keterangan=data.keterangan,
    )


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.absensi_service

    # ---- student actions ----
    @rpc.mutation("absensi.absenMasuk", input=AbsenMasukInput, roles=ANY_ROLE)
    def absen_masuk(data: AbsenMasukInput):
        return service.absen_masuk(siswa_id=data.siswa_id, kelas_id=data.kelas_id)

    @rpc.mutation("absensi.absenPulang", input=AbsenPulangInput, roles=ANY_ROLE)
    def absen_pulang(data: AbsenPulangInput):
        return service.absen_pulang(absensi_id=data.absensi_id)

    @rpc.mutation("absensi.pengajuanIzin", input=PengajuanIzinInput, roles=ANY_ROLE)
    def pengajuan_izin(data: PengajuanIzinInput):
        return service.pengajuan_izin(
            siswa_id=data.siswa_id,
            kelas_id=data.kelas_id,
            tanggal=data.tanggal,
            jenis=data.status,
            keterangan=data.keterangan,
        )

    # ---- teacher/admin actions ----
    @rpc.mutation("absensi.create", input=CreateAbsensiInput, roles=STAFF)
    def create_absensi(data: CreateAbsensiInput):
        return service.create(to_new_absensi(data))

    @rpc.mutation("absensi.bulkRecord", input=BulkRecordInput, roles=STAFF)
    def bulk_record(data: BulkRecordInput):
        return service.bulk_record([to_new_absensi(r) for r in data.records])

    @rpc.mutation("absensi.verifikasiIzin", input=VerifikasiIzinInput, roles=STAFF)
    def verifikasi_izin(data: VerifikasiIzinInput):
        return service.verifikasi_izin(absensi_id=data.absensi_id, guru_id=data.guru_id, status=data.status)

    @rpc.mutation("absensi.update", input=UpdateAbsensiInput, roles=STAFF)
    def update_absensi(data: UpdateAbsensiInput):
        return service.update(
            data.id,
            status=data.status,
            waktu_masuk=data.waktu_masuk,
            waktu_pulang=data.waktu_pulang,
            keterangan=data.keterangan,
            guru_id=data.guru_id,
        )

    @rpc.mutation("absensi.delete", input=IdInput, roles=STAFF)
    def delete_absensi(data: IdInput):
        return service.delete(data.id)

    # ---- queries ----
    @rpc.query("absensi.getByFilter", input=AttendanceFilter, roles=ANY_ROLE)
    def get_by_filter(data: AttendanceFilter):
        return service.get_by_filter(data.to_domain())

    rpc.alias("absensi.getReport", "absensi.getByFilter")

    @rpc.query("absensi.getHariIni", input=OptionalKelasIdInput, roles=ANY_ROLE)
    def get_hari_ini(data: OptionalKelasIdInput):
        return service.get_hari_ini(data.kelas_id)

    @rpc.query("absensi.getByClass", input=ByClassInput, roles=STAFF)
    def get_by_class(data: ByClassInput):
        return service.get_by_class(data.kelas_id, data.tanggal)

    @rpc.query("absensi.getBySiswa", input=BySiswaInput, roles=ANY_ROLE)
    def get_by_siswa(data: BySiswaInput):
        return service.get_by_siswa(data.siswa_id, data.limit)

    @rpc.query("absensi.getByStudent", input=ByStudentInput, roles=ANY_ROLE)
    def get_by_student(data: ByStudentInput):
        return service.get_by_student(data.siswa_id, start_date=data.start_date, end_date=data.end_date)

    @rpc.query("absensi.getPendingIzin", input=OptionalKelasIdInput, roles=STAFF)
    def get_pending_izin(data: OptionalKelasIdInput):
        return service.get_pending_izin(data.kelas_id)

    @rpc.query("absensi.getStats", input=StatsInput, roles=ANY_ROLE)
    def get_stats(data: StatsInput):
        date_range = data.date_range
        return service.get_stats(
            data.kelas_id,
            start_date=date_range.start if date_range else None,
            end_date=date_range.end if date_range else None,
        )
