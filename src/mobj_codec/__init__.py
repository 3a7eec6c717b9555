"""MOBJ Codec - MovieObject.bdmv decoding and encoding."""
from .commands import command_bytes, decode_command, encode_command, encode_raw
from .header import decode_header, encode_header
from .table import decode_file, encode_file, read_file

__all__ = [
    "command_bytes",
    "decode_command",
    "decode_file",
    "decode_header",
    "encode_command",
    "encode_file",
    "encode_header",
    "encode_raw",
    "read_file",
]
