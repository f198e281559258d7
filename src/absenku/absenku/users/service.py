from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..guru.model import Guru
from ..guru.repository import GuruRepository
from ..siswa.model import Siswa
from ..siswa.repository import SiswaRepository
from .model import User
from .repository import UserRepository

_BAD_CREDENTIALS = "Username/NIP/NISN atau password salah"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Public user data plus the linked guru/siswa profile (if any)."""

    user: dict
    profile: Optional[Union[Guru, Siswa]] = None


def _verify_password(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: login, current user and password change."""

    def __init__(self, users: UserRepository, gurus: GuruRepository, siswas: SiswaRepository):
        self._users = users
        self._gurus = gurus
        self._siswas = siswas

    def _find_user(self, identifier: str, role: Optional[Role]) -> Optional[User]:
        # Admin logs in with username, guru with NIP, siswa with NISN.
        user = self._users.get_by_username(identifier)
        if user:
            return user
        if role in (None, Role.GURU):
            guru = self._gurus.get_by_nip(identifier)
            if guru:
                return self._users.get_by_id(guru.user_id)
        if role in (None, Role.SISWA):
            siswa = self._siswas.get_by_nisn(identifier)
            if siswa:
                return self._users.get_by_id(siswa.user_id)
        return None

    def _profile_for(self, user: User) -> Optional[Union[Guru, Siswa]]:
        if user.role == Role.GURU:
            return self._gurus.get_by_user_id(user.id)
        if user.role == Role.SISWA:
            return self._siswas.get_by_user_id(user.id)
        return None

    def login(self, username: str, password: str, role: Optional[Role] = None) -> AuthenticatedUser:
        identifier = (username or "").strip()
        if not identifier or not password:
            raise AuthenticationError(_BAD_CREDENTIALS)

        user = self._find_user(identifier, role)
        if not user or not user.is_active:
            raise AuthenticationError(_BAD_CREDENTIALS)
        if not _verify_password(user.password_hash, password):
            raise AuthenticationError(_BAD_CREDENTIALS)
        if role is not None and user.role != role:
            raise AuthenticationError(_BAD_CREDENTIALS)

        return AuthenticatedUser(user=user.to_public(), profile=self._profile_for(user))

    def get_current_user(self, user_id: int) -> Optional[AuthenticatedUser]:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            return None
        return AuthenticatedUser(user=user.to_public(), profile=self._profile_for(user))

    def change_password(self, *, user_id: int, current_password: str, new_password: str) -> bool:
        require_min_length(new_password, "Password baru", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_id(int(user_id))
        if not user:
            return False
        if not _verify_password(user.password_hash, current_password):
            return False

        return self._users.update(user.id, fields={"password_hash": generate_password_hash(new_password)})


class UserService:
    """Use case: manage login accounts (admin)."""

    def __init__(self, users: UserRepository, gurus: GuruRepository, siswas: SiswaRepository):
        self._users = users
        self._gurus = gurus
        self._siswas = siswas

    def create(self, *, username: str, password: str, role: Role) -> dict:
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ValidationError("Username sudah digunakan")

        user_id = self._users.create(
            username=username,
            password_hash=generate_password_hash(password),
            role=Role(role),
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("Gagal membuat user")
        return user.to_public()

    def get_all(self) -> list[dict]:
        return [u.to_public() for u in self._users.list_all()]

    def get_by_id(self, user_id: int) -> Optional[dict]:
        user = self._users.get_by_id(int(user_id))
        return user.to_public() if user else None

    def get_by_role(self, role: Role) -> list[dict]:
        return [u.to_public() for u in self._users.list_by_role(Role(role))]

    def update(self, user_id: int, updates: dict) -> Optional[dict]:
        user = self._users.get_by_id(int(user_id))
        if not user:
            return None

        fields: dict = {}
        if updates.get("username") is not None:
            username = require_non_empty(updates["username"], "Username")
            other = self._users.get_by_username(username)
            if other and other.id != user.id:
                raise ValidationError("Username sudah digunakan")
            fields["username"] = username
        if updates.get("password") is not None:
            require_min_length(updates["password"], "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(updates["password"])
        if updates.get("role") is not None:
            role = Role(updates["role"])
            if role != user.role and (self._gurus.get_by_user_id(user.id) or self._siswas.get_by_user_id(user.id)):
                raise ValidationError("Role tidak dapat diubah selama user masih memiliki profil guru atau siswa")
            fields["role"] = role
        if updates.get("is_active") is not None:
            fields["is_active"] = bool(updates["is_active"])

        if fields and not self._users.update(user.id, fields=fields):
            return None
        return self.get_by_id(user.id)

    def delete(self, user_id: int) -> bool:
        # guru/siswa profiles are removed by ON DELETE CASCADE.
        return self._users.delete_by_id(int(user_id))
