"""Header codec for MovieObject.bdmv."""
from __future__ import annotations

import struct

from mobj_core.errors import BadMagicError, TruncatedHeaderError
from mobj_core.model import Header
from mobj_core.protocol import HEADER_FIELDS, MAGIC, U16_FMT, U32_FMT

from .cursor import Cursor


def _field(cursor: Cursor, index: int) -> bytes:
    name, size = HEADER_FIELDS[index]
    return cursor.take(size, lambda: TruncatedHeaderError(name))


def read_header(cursor: Cursor) -> Header:
    """Read the fixed header, leaving the cursor at the first movie object."""
    # Magic first; nothing else is parsed from a file with the wrong signature.
    magic = _field(cursor, 0)
    if magic != MAGIC:
        raise BadMagicError(magic)

    (extension_start,) = struct.unpack(U32_FMT, _field(cursor, 1))
    reserved = _field(cursor, 2)
    (table_length,) = struct.unpack(U32_FMT, _field(cursor, 3))
    table_reserved = _field(cursor, 4)
    (object_count,) = struct.unpack(U16_FMT, _field(cursor, 5))

    return Header(
        extension_start=extension_start,
        reserved=reserved,
        table_length=table_length,
        table_reserved=table_reserved,
        object_count=object_count,
    )


def decode_header(data: bytes) -> tuple[Header, int]:
    """Decode the header. Returns the header and the object table offset."""
    cursor = Cursor(data)
    header = read_header(cursor)
    return header, cursor.offset


def encode_header(header: Header) -> bytes:
    return b"".join(
        [
            MAGIC,
            struct.pack(U32_FMT, header.extension_start),
            header.reserved,
            struct.pack(U32_FMT, header.table_length),
            header.table_reserved,
            struct.pack(U16_FMT, header.object_count),
        ]
    )
