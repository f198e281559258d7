from .registry import Procedure, ProcedureKind, ProcedureRegistry

__all__ = ["Procedure", "ProcedureKind", "ProcedureRegistry"]
