"""
Pydantic schemas for siswa procedures.
"""

from typing import Optional

from pydantic import Field

from ..rpc.schemas import Schema


class CreateSiswaInput(Schema):
    user_id: int
    nisn: str = Field(min_length=1)
    nama: str = Field(min_length=1)
    kelas_id: int
    foto: Optional[str] = None


class UpdateSiswaInput(Schema):
    id: int
    nisn: Optional[str] = Field(default=None, min_length=1)
    nama: Optional[str] = Field(default=None, min_length=1)
    kelas_id: Optional[int] = None
    foto: Optional[str] = None


class NisnInput(Schema):
    nisn: str = Field(min_length=1)
