from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ADMIN_ONLY, ANY_ROLE, STAFF
from ..rpc.schemas import IdInput, KelasIdInput, UpdateProfileInput, UserIdInput
from .schemas import CreateSiswaInput, NisnInput, UpdateSiswaInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.siswa_service

    @rpc.mutation("siswa.create", input=CreateSiswaInput, roles=ADMIN_ONLY)
    def create_siswa(data: CreateSiswaInput):
        return service.create(
            user_id=data.user_id,
            nisn=data.nisn,
            nama=data.nama,
            kelas_id=data.kelas_id,
            foto=data.foto,
        )

    @rpc.query("siswa.getAll", roles=STAFF)
    def get_all_siswa():
        return service.get_all()

    @rpc.query("siswa.getById", input=IdInput, roles=ANY_ROLE)
    def get_siswa(data: IdInput):
        return service.get_by_id(data.id)

    @rpc.query("siswa.getByUserId", input=UserIdInput, roles=ANY_ROLE)
    def get_siswa_by_user(data: UserIdInput):
        return service.get_by_user_id(data.user_id)

    @rpc.query("siswa.getByNisn", input=NisnInput, roles=STAFF)
    def get_siswa_by_nisn(data: NisnInput):
        return service.get_by_nisn(data.nisn)

    @rpc.query("siswa.getByKelas", input=KelasIdInput, roles=STAFF)
    def get_siswa_by_kelas(data: KelasIdInput):
        return service.get_by_kelas(data.kelas_id)

    rpc.alias("siswa.getByClass", "siswa.getByKelas")

    @rpc.mutation("siswa.update", input=UpdateSiswaInput, roles=ADMIN_ONLY)
    def update_siswa(data: UpdateSiswaInput):
        return service.update(
            data.id,
            nisn=data.nisn,
            nama=data.nama,
            kelas_id=data.kelas_id,
            foto=data.foto,
        )

    @rpc.mutation("siswa.updateProfile", input=UpdateProfileInput, roles=ANY_ROLE)
    def update_siswa_profile(data: UpdateProfileInput):
        return service.update_profile(user_id=data.user_id, nama=data.nama, foto=data.foto)

    @rpc.mutation("siswa.delete", input=IdInput, roles=ADMIN_ONLY)
    def delete_siswa(data: IdInput):
        return service.delete(data.id)
