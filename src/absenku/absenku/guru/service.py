from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import optional_stripped, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import Guru
from .repository import GuruRepository


class GuruService:
    def __init__(self, gurus: GuruRepository, users: UserRepository):
        self._gurus = gurus
        self._users = users

    def create(self, *, user_id: int, nip: str, nama: str, foto: Optional[str] = None) -> Guru:
        nip = require_non_empty(nip, "NIP")
        nama = require_non_empty(nama, "Nama")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User tidak ditemukan")
        if user.role != Role.GURU:
            raise ValidationError("User harus memiliki role guru")
        if self._gurus.get_by_user_id(user.id):
            raise ValidationError("User sudah memiliki profil guru")
        if self._gurus.get_by_nip(nip):
            raise ValidationError("NIP sudah terdaftar")

        guru_id = self._gurus.create(user_id=user.id, nip=nip, nama=nama, foto=optional_stripped(foto))
        guru = self._gurus.get_by_id(guru_id)
        if not guru:
            raise ValidationError("Gagal membuat data guru")
        return guru

    def get_all(self) -> Sequence[Guru]:
        return self._gurus.list_all()

    def get_by_id(self, guru_id: int) -> Optional[Guru]:
        return self._gurus.get_by_id(int(guru_id))

    def get_by_user_id(self, user_id: int) -> Optional[Guru]:
        return self._gurus.get_by_user_id(int(user_id))

    def update(
        self,
        guru_id: int,
        *,
        nip: Optional[str] = None,
        nama: Optional[str] = None,
        foto: Optional[str] = None,
    ) -> Optional[Guru]:
        guru = self._gurus.get_by_id(int(guru_id))
        if not guru:
            return None

        fields: dict = {}
        if nip is not None:
            nip = require_non_empty(nip, "NIP")
            other = self._gurus.get_by_nip(nip)
            if other and other.id != guru.id:
                raise ValidationError("NIP sudah terdaftar")
            fields["nip"] = nip
        if nama is not None:
            fields["nama"] = require_non_empty(nama, "Nama")
        if foto is not None:
            fields["foto"] = optional_stripped(foto)

        if fields and not self._gurus.update(guru.id, fields=fields):
            return None
        return self._gurus.get_by_id(guru.id)

    def update_profile(self, *, user_id: int, nama: Optional[str] = None, foto: Optional[str] = None) -> Guru:
        guru = self._gurus.get_by_user_id(int(user_id))
        if not guru:
            raise NotFoundError("Profil guru tidak ditemukan")
        updated = self.update(guru.id, nama=nama, foto=foto)
        if not updated:
            raise NotFoundError("Profil guru tidak ditemukan")
        return updated

    def delete(self, guru_id: int) -> bool:
        return self._gurus.delete_by_id(int(guru_id))
