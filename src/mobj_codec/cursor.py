from __future__ import annotations

import struct
from typing import Callable

from mobj_core.errors import MovieObjectError


class Cursor:
    """Sequential reader over an in-memory buffer.

    Every read names the error to raise on shortfall, so a truncated file
    always reports exactly which field ran out of data.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int, error: Callable[[], MovieObjectError]) -> bytes:
        if self.remaining < size:
            raise error()
        chunk = self.data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def unpack(self, fmt: str, error: Callable[[], MovieObjectError]) -> int:
        (value,) = struct.unpack(fmt, self.take(struct.calcsize(fmt), error))
        return value

    def rest(self) -> bytes:
        chunk = self.data[self.offset :]
        self.offset = len(self.data)
        return chunk
