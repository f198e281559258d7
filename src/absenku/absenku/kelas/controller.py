from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ADMIN_ONLY, ANY_ROLE, STAFF
from ..rpc.schemas import GuruIdInput, IdInput
from .schemas import CreateKelasInput, UpdateKelasInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.kelas_service

    @rpc.mutation("kelas.create", input=CreateKelasInput, roles=ADMIN_ONLY)
    def create_kelas(data: CreateKelasInput):
        return service.create(nama_kelas=data.nama_kelas, wali_kelas_id=data.wali_kelas_id)

    @rpc.query("kelas.getAll", roles=ANY_ROLE)
    def get_all_kelas():
        return service.get_all()

    @rpc.query("kelas.getById", input=IdInput, roles=ANY_ROLE)
    def get_kelas(data: IdInput):
        return service.get_by_id(data.id)

    @rpc.query("kelas.getByWaliKelas", input=GuruIdInput, roles=STAFF)
    def get_kelas_by_wali(data: GuruIdInput):
        return service.get_by_wali_kelas(data.guru_id)

    @rpc.query("kelas.getByTeacher", input=GuruIdInput, roles=STAFF)
    def get_kelas_by_teacher(data: GuruIdInput):
        return service.get_by_teacher(data.guru_id)

    @rpc.mutation("kelas.update", input=UpdateKelasInput, roles=ADMIN_ONLY)
    def update_kelas(data: UpdateKelasInput):
        kwargs = {}
        if "wali_kelas_id" in data.model_fields_set:
            kwargs["wali_kelas_id"] = data.wali_kelas_id
        return service.update(data.id, nama_kelas=data.nama_kelas, **kwargs)

    @rpc.mutation("kelas.delete", input=IdInput, roles=ADMIN_ONLY)
    def delete_kelas(data: IdInput):
        return service.delete(data.id)
