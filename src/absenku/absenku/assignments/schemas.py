"""
Pydantic schemas for teacher assignment procedures.
"""

from ..rpc.schemas import Schema


class AssignmentInput(Schema):
    guru_id: int
    kelas_id: int
    is_homeroom: bool = False


class RemoveAssignmentInput(Schema):
    guru_id: int
    kelas_id: int
