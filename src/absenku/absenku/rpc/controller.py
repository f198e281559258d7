from __future__ import annotations

import json
from typing import Any

from flask import Flask, current_app, jsonify, request, session

from ..core.exceptions import AuthenticationError, AuthorizationError
from .errors import RpcError, map_exception
from .registry import Procedure, ProcedureRegistry

EXTENSION_KEY = "absenku.rpc"


def get_registry(app: Flask) -> ProcedureRegistry:
    return app.extensions[EXTENSION_KEY]


def _read_input() -> Any:
    if request.method == "GET":
        raw = request.args.get("input")
        if raw is None or raw == "":
            return None
        try:
            return json.loads(raw)
        except ValueError:
            raise RpcError("BAD_REQUEST", 400, "Input JSON tidak valid")

    if not request.data:
        return None
    payload = request.get_json(silent=True)
    if payload is None:
        raise RpcError("BAD_REQUEST", 400, "Input JSON tidak valid")
    return payload


def _check_method(procedure: Procedure) -> None:
    if request.method != procedure.http_method:
        raise RpcError(
            "METHOD_NOT_SUPPORTED",
            405,
            f"{procedure.kind.value} '{procedure.name}' harus dipanggil dengan {procedure.http_method}",
        )


def require_roles(roles) -> None:
    """Check the session role when ENFORCE_ROLES is on. Empty ``roles`` means public."""
    if not current_app.config.get("ENFORCE_ROLES") or not roles:
        return
    role = session.get("role")
    if not role:
        raise AuthenticationError("Silakan login terlebih dahulu")
    if role not in {r.value for r in roles}:
        raise AuthorizationError("Anda tidak memiliki akses")


def register(app: Flask, registry: ProcedureRegistry) -> None:
    app.extensions[EXTENSION_KEY] = registry

    @app.route("/trpc/<path:name>", methods=["GET", "POST"], endpoint="trpc")
    def trpc(name: str):
        try:
            procedure = registry.resolve(name)
            _check_method(procedure)
            require_roles(procedure.roles)
            data = procedure.call(_read_input())
        except Exception as e:
            payload, status = map_exception(e)
            return jsonify(payload), status
        return jsonify({"result": {"data": data}})
