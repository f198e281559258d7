from __future__ import annotations

from typing import Any, Optional

from flask import current_app
from pydantic import ValidationError as SchemaValidationError

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)


class RpcError(Exception):
    """Protocol-level failure (bad JSON, wrong HTTP verb ...)."""

    def __init__(self, code: str, http_status: int, message: str):
        super().__init__(message)
        self.code = code
        self.http_status = http_status


# Checked in order; subclasses first.
_DOMAIN_ERRORS = (
    (ValidationError, "BAD_REQUEST", 400),
    (NotFoundError, "NOT_FOUND", 404),
    (AuthenticationError, "UNAUTHORIZED", 401),
    (AuthorizationError, "FORBIDDEN", 403),
    (DomainError, "BAD_REQUEST", 400),
)


def error_payload(code: str, message: str, details: Optional[Any] = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


def schema_error_details(err: SchemaValidationError) -> list[dict]:
    return [
        {
            "path": ".".join(str(part) for part in e.get("loc", ())),
            "message": e.get("msg", ""),
            "type": e.get("type", ""),
        }
        for e in err.errors()
    ]


def map_exception(err: Exception) -> tuple[dict, int]:
    if isinstance(err, RpcError):
        return error_payload(err.code, str(err)), err.http_status

    if isinstance(err, SchemaValidationError):
        return error_payload("BAD_REQUEST", "Input tidak valid", schema_error_details(err)), 400

    for exc_type, code, status in _DOMAIN_ERRORS:
        if isinstance(err, exc_type):
            return error_payload(code, str(err)), status

    current_app.logger.exception("Unhandled error in RPC procedure")
    message = "Terjadi kesalahan pada server"
    if current_app.config.get("DEBUG"):
        message = f"{message}: {err}"
    return error_payload("INTERNAL_SERVER_ERROR", message), 500
