"""
Pydantic schemas for guru procedures.
"""

from typing import Optional

from pydantic import Field

from ..rpc.schemas import Schema


class CreateGuruInput(Schema):
    user_id: int
    nip: str = Field(min_length=1)
    nama: str = Field(min_length=1)
    foto: Optional[str] = None


class UpdateGuruInput(Schema):
    id: int
    nip: Optional[str] = Field(default=None, min_length=1)
    nama: Optional[str] = Field(default=None, min_length=1)
    foto: Optional[str] = None
