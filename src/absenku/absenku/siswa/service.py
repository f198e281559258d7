from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import optional_stripped, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..kelas.repository import KelasRepository
from ..users.repository import UserRepository
from .model import Siswa
from .repository import SiswaRepository


class SiswaService:
    def __init__(self, siswas: SiswaRepository, users: UserRepository, kelas: KelasRepository):
        self._siswas = siswas
        self._users = users
        self._kelas = kelas

    def _require_kelas(self, kelas_id: int) -> None:
        if not self._kelas.get_by_id(int(kelas_id)):
            raise NotFoundError("Kelas tidak ditemukan")

    def create(
        self,
        *,
        user_id: int,
        nisn: str,
        nama: str,
        kelas_id: int,
        foto: Optional[str] = None,
    ) -> Siswa:
        nisn = require_non_empty(nisn, "NISN")
        nama = require_non_empty(nama, "Nama")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User tidak ditemukan")
        if user.role != Role.SISWA:
            raise ValidationError("User harus memiliki role siswa")
        if self._siswas.get_by_user_id(user.id):
            raise ValidationError("User sudah memiliki profil siswa")
        self._require_kelas(kelas_id)
        if self._siswas.get_by_nisn(nisn):
            raise ValidationError("NISN sudah terdaftar")

        siswa_id = self._siswas.create(
            user_id=user.id,
            nisn=nisn,
            nama=nama,
            kelas_id=int(kelas_id),
            foto=optional_stripped(foto),
        )
        siswa = self._siswas.get_by_id(siswa_id)
        if not siswa:
            raise ValidationError("Gagal membuat data siswa")
        return siswa

    def get_all(self) -> Sequence[Siswa]:
        return self._siswas.list_all()

    def get_by_id(self, siswa_id: int) -> Optional[Siswa]:
        return self._siswas.get_by_id(int(siswa_id))

    def get_by_user_id(self, user_id: int) -> Optional[Siswa]:
        return self._siswas.get_by_user_id(int(user_id))

    def get_by_nisn(self, nisn: str) -> Optional[Siswa]:
        return self._siswas.get_by_nisn(nisn.strip())

    def get_by_kelas(self, kelas_id: int) -> Sequence[Siswa]:
        return self._siswas.list_by_kelas([int(kelas_id)])

    def update(
        self,
        siswa_id: int,
        *,
        nisn: Optional[str] = None,
        nama: Optional[str] = None,
        kelas_id: Optional[int] = None,
        foto: Optional[str] = None,
    ) -> Optional[Siswa]:
        siswa = self._siswas.get_by_id(int(siswa_id))
        if not siswa:
            return None

        fields: dict = {}
        if nisn is not None:
            nisn = require_non_empty(nisn, "NISN")
            other = self._siswas.get_by_nisn(nisn)
            if other and other.id != siswa.id:
                raise ValidationError("NISN sudah terdaftar")
            fields["nisn"] = nisn
        if nama is not None:
            fields["nama"] = require_non_empty(nama, "Nama")
        if kelas_id is not None:
            self._require_kelas(kelas_id)
            fields["kelas_id"] = int(kelas_id)
        if foto is not None:
            fields["foto"] = optional_stripped(foto)

        if fields and not self._siswas.update(siswa.id, fields=fields):
            return None
        return self._siswas.get_by_id(siswa.id)

    def update_profile(self, *, user_id: int, nama: Optional[str] = None, foto: Optional[str] = None) -> Siswa:
        siswa = self._siswas.get_by_user_id(int(user_id))
        if not siswa:
            raise NotFoundError("Profil siswa tidak ditemukan")
        updated = self.update(siswa.id, nama=nama, foto=foto)
        if not updated:
            raise NotFoundError("Profil siswa tidak ditemukan")
        return updated

    def delete(self, siswa_id: int) -> bool:
        return self._siswas.delete_by_id(int(siswa_id))
