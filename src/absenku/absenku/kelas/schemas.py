"""
Pydantic schemas for kelas procedures.
"""

from typing import Optional

from pydantic import Field

from ..rpc.schemas import Schema


class CreateKelasInput(Schema):
    nama_kelas: str = Field(min_length=1)
    wali_kelas_id: Optional[int] = None


class UpdateKelasInput(Schema):
    id: int
    nama_kelas: Optional[str] = Field(default=None, min_length=1)
    # Explicit null clears the wali kelas; omit the key to keep it.
    wali_kelas_id: Optional[int] = None
