"""Object table codec and whole-file read/decode/encode."""
from __future__ import annotations

import struct
from pathlib import Path
from warnings import warn

from mobj_core.errors import MovieObjectIOError, TruncatedCommandError, TruncatedObjectError
from mobj_core.model import MovieObject, MovieObjectFile
from mobj_core.protocol import COMMAND_LEN, MOVIE_OBJECT_PATH, U16_FMT

from .commands import command_bytes, decode_command
from .cursor import Cursor
from .header import encode_header, read_header


def read_objects(cursor: Cursor, count: int) -> list[MovieObject]:
    objects: list[MovieObject] = []
    for i in range(count):
        flags = cursor.unpack(U16_FMT, lambda: TruncatedObjectError(i, "flags"))
        command_count = cursor.unpack(U16_FMT, lambda: TruncatedObjectError(i, "navigation commands count"))

        commands = []
        for j in range(command_count):
            # Each navigation command should be exactly 96 bits.
            raw = cursor.take(COMMAND_LEN, lambda: TruncatedCommandError(i, j))
            commands.append(decode_command(raw, i, j))

        objects.append(MovieObject.from_flags(flags, commands))
    return objects


def decode_file(data: bytes) -> MovieObjectFile:
    """Decode a whole MovieObject.bdmv buffer. Any error rejects the file."""
    cursor = Cursor(data)
    header = read_header(cursor)
    objects = read_objects(cursor, header.object_count)
    mobj = MovieObjectFile(header=header, objects=objects, extension_data=cursor.rest())

    computed = mobj.computed_table_length()
    if computed != header.table_length:
        warn(f"Movie objects length field is {header.table_length} bytes but the table occupies {computed}")
    return mobj


def encode_objects(objects) -> bytes:
    out = bytearray()
    for obj in objects:
        out += struct.pack(U16_FMT, obj.flags)
        out += struct.pack(U16_FMT, len(obj.commands))
        for command in obj.commands:
            out += command_bytes(command)
    return bytes(out)


def encode_file(mobj: MovieObjectFile) -> bytes:
    return encode_header(mobj.header) + encode_objects(mobj.objects) + mobj.extension_data


def resolve_path(path: Path) -> Path:
    """Accept either a disc root or the MovieObject.bdmv file itself."""
    path = Path(path)
    if path.is_dir():
        return path / MOVIE_OBJECT_PATH
    return path


def read_file(path: Path) -> MovieObjectFile:
    mobj_path = resolve_path(path)
    try:
        data = mobj_path.read_bytes()
    except OSError as e:
        raise MovieObjectIOError(mobj_path) from e
    return decode_file(data)
