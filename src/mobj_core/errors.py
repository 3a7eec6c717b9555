"""Exception taxonomy for MovieObject.bdmv decoding and patching.

Every error is terminal for the call that raised it. Each carries a stable
``code`` from :data:`mobj_core.const.ERRORS` so callers can report failures
without parsing messages.
"""
from __future__ import annotations

from .const import ERRORS


def _hex(raw: bytes) -> str:
    return " ".join(f"{b:02x}" for b in raw)


def _where(object_index: int | None, command_index: int | None = None) -> str:
    parts = []
    if object_index is not None:
        parts.append(f"movie object #{object_index}")
    if command_index is not None:
        parts.append(f"navigation command #{command_index}")
    return " ".join(parts)


class MovieObjectError(ValueError):
    """Base class for all MovieObject.bdmv failures."""

    code = ""

    def __init__(self, detail: str = ""):
        self.detail = detail
        message = ERRORS[self.code]
        super().__init__(f"{message}: {detail}" if detail else message)


class MovieObjectIOError(MovieObjectError):
    code = "E_IO"

    def __init__(self, path):
        self.path = path
        super().__init__(str(path))


class TruncatedHeaderError(MovieObjectError):
    code = "E_HEADER_TRUNCATED"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"no {field}")


class BadMagicError(MovieObjectError):
    code = "E_BAD_MAGIC"

    def __init__(self, actual: bytes):
        self.actual = bytes(actual)
        super().__init__(f"{self.actual!r} ({_hex(self.actual)})")


class TruncatedObjectError(MovieObjectError):
    code = "E_OBJECT_TRUNCATED"

    def __init__(self, object_index: int, field: str):
        self.object_index = object_index
        self.field = field
        super().__init__(f"{_where(object_index)} missing {field}")


class TruncatedCommandError(MovieObjectError):
    code = "E_COMMAND_TRUNCATED"

    def __init__(self, object_index: int | None, command_index: int | None):
        self.object_index = object_index
        self.command_index = command_index
        super().__init__(_where(object_index, command_index))


class BadOperandCountError(MovieObjectError):
    code = "E_BAD_OPERAND_COUNT"

    def __init__(self, operand_count: int, object_index: int | None = None, command_index: int | None = None):
        self.operand_count = operand_count
        self.object_index = object_index
        self.command_index = command_index
        where = _where(object_index, command_index)
        super().__init__(f"{where} {operand_count:#04x}".strip())


class InvalidCommandError(MovieObjectError):
    code = "E_INVALID_COMMAND"

    def __init__(self, raw: bytes, object_index: int | None = None, command_index: int | None = None):
        self.raw = bytes(raw)
        self.object_index = object_index
        self.command_index = command_index
        where = _where(object_index, command_index)
        super().__init__(f"{where} [{_hex(self.raw)}]".strip())


class PatchLocationError(MovieObjectError):
    code = "E_PATCH_LOCATION"

    def __init__(self, object_index: int, command_index: int):
        self.object_index = object_index
        self.command_index = command_index
        super().__init__(_where(object_index, command_index))


class PatchSizeError(MovieObjectError):
    code = "E_PATCH_SIZE"

    def __init__(self, input_length: int, output_length: int):
        self.input_length = input_length
        self.output_length = output_length
        super().__init__(f"input is {input_length} bytes, output is {output_length}")
