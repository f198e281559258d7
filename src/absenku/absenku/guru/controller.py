from __future__ import annotations

from flask import Flask

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ADMIN_ONLY, ANY_ROLE, STAFF
from ..rpc.schemas import IdInput, UpdateProfileInput, UserIdInput
from .schemas import CreateGuruInput, UpdateGuruInput


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)
    service = container.guru_service

    @rpc.mutation("guru.create", input=CreateGuruInput, roles=ADMIN_ONLY)
    def create_guru(data: CreateGuruInput):
        return service.create(user_id=data.user_id, nip=data.nip, nama=data.nama, foto=data.foto)

    @rpc.query("guru.getAll", roles=ANY_ROLE)
    def get_gurus():
        return service.get_all()

    @rpc.query("guru.getById", input=IdInput, roles=ANY_ROLE)
    def get_guru(data: IdInput):
        return service.get_by_id(data.id)

    @rpc.query("guru.getByUserId", input=UserIdInput, roles=STAFF)
    def get_guru_by_user(data: UserIdInput):
        return service.get_by_user_id(data.user_id)

    @rpc.mutation("guru.update", input=UpdateGuruInput, roles=ADMIN_ONLY)
    def update_guru(data: UpdateGuruInput):
        return service.update(data.id, nip=data.nip, nama=data.nama, foto=data.foto)

    @rpc.mutation("guru.updateProfile", input=UpdateProfileInput, roles=STAFF)
    def update_guru_profile(data: UpdateProfileInput):
        return service.update_profile(user_id=data.user_id, nama=data.nama, foto=data.foto)

    @rpc.mutation("guru.delete", input=IdInput, roles=ADMIN_ONLY)
    def delete_guru(data: IdInput):
        return service.delete(data.id)
