"""MOBJ Core - Shared model, layout constants and errors."""
from .model import (
    Branch,
    Compare,
    Gpr,
    Header,
    Immediate,
    MovieObject,
    MovieObjectFile,
    NavigationCommand,
    OperandCount,
    Psr,
    SetOp,
    UnknownRegister,
)
from .errors import MovieObjectError

__all__ = [
    "Branch",
    "Compare",
    "Gpr",
    "Header",
    "Immediate",
    "MovieObject",
    "MovieObjectError",
    "MovieObjectFile",
    "NavigationCommand",
    "OperandCount",
    "Psr",
    "SetOp",
    "UnknownRegister",
]
