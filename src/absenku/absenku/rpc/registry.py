"""Procedure registry for the JSON RPC endpoint.

Procedures are addressed as ``<router>.<procedure>`` (``kelas.getAll``,
``absensi.absenMasuk`` ...). Every procedure is either a *query* (served on
GET) or a *mutation* (served on POST) and may declare a pydantic input type.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, TypeAdapter

from ..core.enums import Role
from ..core.exceptions import NotFoundError

# English router names kept for older clients.
ROUTER_ALIASES = {
    "classes": "kelas",
    "students": "siswa",
    "teachers": "guru",
    "attendance": "absensi",
}


class ProcedureKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


@lru_cache(maxsize=None)
def _adapter(input_type: Any) -> TypeAdapter:
    return TypeAdapter(input_type)


@dataclass(frozen=True)
class Procedure:
    name: str
    handler: Callable[..., Any]
    kind: ProcedureKind
    input_type: Any = None
    roles: frozenset = frozenset()

    @property
    def http_method(self) -> str:
        return "GET" if self.kind == ProcedureKind.QUERY else "POST"

    def parse_input(self, raw: Any) -> Any:
        if self.input_type is None:
            return None
        if raw is None and isinstance(self.input_type, type) and issubclass(self.input_type, BaseModel):
            # Procedures whose fields are all optional may be called without input.
            raw = {}
        return _adapter(self.input_type).validate_python(raw)

    def call(self, raw: Any) -> Any:
        if self.input_type is None:
            return self.handler()
        return self.handler(self.parse_input(raw))


class ProcedureRegistry:
    def __init__(self, aliases: Optional[dict[str, str]] = None):
        self._procedures: dict[str, Procedure] = {}
        self._aliases = dict(ROUTER_ALIASES if aliases is None else aliases)

    def add(
        self,
        name: str,
        handler: Callable[..., Any],
        *,
        kind: ProcedureKind,
        input: Any = None,
        roles: Iterable[Role] = (),
    ) -> Procedure:
        if name in self._procedures:
            raise ValueError(f"Procedure already registered: {name}")
        procedure = Procedure(
            name=name,
            handler=handler,
            kind=kind,
            input_type=input,
            roles=frozenset(roles),
        )
        self._procedures[name] = procedure
        return procedure

    def query(self, name: str, *, input: Any = None, roles: Iterable[Role] = ()):
        def decorator(fn):
            self.add(name, fn, kind=ProcedureKind.QUERY, input=input, roles=roles)
            return fn

        return decorator

    def mutation(self, name: str, *, input: Any = None, roles: Iterable[Role] = ()):
        def decorator(fn):
            self.add(name, fn, kind=ProcedureKind.MUTATION, input=input, roles=roles)
            return fn

        return decorator

    def alias(self, alias: str, target: str) -> None:
        """Expose an already registered procedure under a second name."""
        procedure = self.resolve(target)
        self._procedures[alias] = Procedure(
            name=alias,
            handler=procedure.handler,
            kind=procedure.kind,
            input_type=procedure.input_type,
            roles=procedure.roles,
        )

    def canonical_name(self, name: str) -> str:
        router, sep, proc = name.partition(".")
        if not sep:
            return name
        return f"{self._aliases.get(router, router)}.{proc}"

    def resolve(self, name: str) -> Procedure:
        procedure = self._procedures.get(self.canonical_name(name))
        if procedure is None:
            raise NotFoundError(f"Prosedur tidak ditemukan: {name}")
        return procedure

    def names(self) -> list[str]:
        return sorted(self._procedures)

    def __contains__(self, name: str) -> bool:
        return self.canonical_name(name) in self._procedures
