"""
Pydantic schemas for auth and user management procedures.
"""

from typing import Optional

from pydantic import Field

from ..core.enums import Role
from ..rpc.schemas import Schema


# ---- Auth ----
class LoginInput(Schema):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: Optional[Role] = None


class CurrentUserInput(Schema):
    user_id: Optional[int] = Field(default=None, alias="userId")


class ChangePasswordInput(Schema):
    user_id: int
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


# ---- Users ----
class CreateUserInput(Schema):
    username: str = Field(min_length=1)
    password: str = Field(min_length=6)
    role: Role


class UserUpdates(Schema):
    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class UpdateUserInput(Schema):
    id: int
    updates: UserUpdates


class RoleInput(Schema):
    role: Role
