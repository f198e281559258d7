from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..rpc.controller import get_registry
from ..rpc.roles import ADMIN_ONLY, ANY_ROLE
from ..rpc.schemas import IdInput
from .schemas import (
    ChangePasswordInput,
    CreateUserInput,
    CurrentUserInput,
    LoginInput,
    RoleInput,
    UpdateUserInput,
)


def register(app: Flask, container: Container) -> None:
    rpc = get_registry(app)

    # ---- auth ----
    @rpc.mutation("auth.login", input=LoginInput)
    def login(data: LoginInput):
        result = container.auth_service.login(data.username, data.password, data.role)
        session.clear()
        session["user_id"] = result.user["id"]
        session["username"] = result.user["username"]
        session["role"] = result.user["role"]
        return result

    @rpc.mutation("auth.logout")
    def logout():
        session.clear()
        return True

    @rpc.query("auth.getCurrentUser", input=CurrentUserInput)
    def get_current_user(data: CurrentUserInput):
        user_id = data.user_id if data.user_id is not None else session.get("user_id")
        if user_id is None:
            return None
        return container.auth_service.get_current_user(int(user_id))

    @rpc.mutation("auth.changePassword", input=ChangePasswordInput, roles=ANY_ROLE)
    def change_password(data: ChangePasswordInput):
        return container.auth_service.change_password(
            user_id=data.user_id,
            current_password=data.current_password,
            new_password=data.new_password,
        )

    # ---- users ----
    @rpc.mutation("users.create", input=CreateUserInput, roles=ADMIN_ONLY)
    def create_user(data: CreateUserInput):
        return container.user_service.create(username=data.username, password=data.password, role=data.role)

    @rpc.query("users.getAll", roles=ADMIN_ONLY)
    def get_users():
        return container.user_service.get_all()

    @rpc.query("users.getById", input=IdInput, roles=ADMIN_ONLY)
    def get_user(data: IdInput):
        return container.user_service.get_by_id(data.id)

    @rpc.query("users.getByRole", input=RoleInput, roles=ADMIN_ONLY)
    def get_users_by_role(data: RoleInput):
        return container.user_service.get_by_role(data.role)

    @rpc.mutation("users.update", input=UpdateUserInput, roles=ADMIN_ONLY)
    def update_user(data: UpdateUserInput):
        return container.user_service.update(data.id, data.updates.model_dump(exclude_none=True))

    @rpc.mutation("users.delete", input=IdInput, roles=ADMIN_ONLY)
    def delete_user(data: IdInput):
        return container.user_service.delete(data.id)
