import struct

import pytest

MAGIC = b"MOBJ0200"

# Set/Move GPR1 <- PSR20 (region)
MOVE_PSR20 = bytes.fromhex("500000010000000180000014")
# Set/Move GPR2 <- PSR19 (country)
MOVE_PSR19 = bytes.fromhex("500000010000000280000013")
# Compare/Eq GPR1, 0x0
EQ_IMM = bytes.fromhex("484002000000000100000000")
# Branch/JumpTitle 0x1
JUMP_TITLE = bytes.fromhex("218100000000000100000000")
# Set/Move PSR20 <- GPR1 (writes a read-only register)
MOVE_TO_PSR20 = bytes.fromhex("500000018000001400000001")
# Set/Move GPR1 with one operand; the PSR20 source is never read
MOVE_ONE_OPERAND = bytes.fromhex("300000010000000180000014")
NOP = bytes(12)


def build_file(objects, extension_start=0, reserved=bytes(28), table_reserved=bytes(4), extension=b"", table_length=None):
    """Assemble a MovieObject.bdmv from ``[(flags, [record, ...]), ...]`` by hand."""
    body = b""
    for flags, records in objects:
        body += struct.pack(">HH", flags, len(records)) + b"".join(records)
    if table_length is None:
        table_length = 6 + len(body)
    return (
        MAGIC
        + struct.pack(">I", extension_start)
        + reserved
        + struct.pack(">I", table_length)
        + table_reserved
        + struct.pack(">H", len(objects))
        + body
        + extension
    )


def record_offset(object_sizes, object_index, command_index):
    """Byte offset of a record, given the command counts of each object."""
    offset = 50
    for count in object_sizes[:object_index]:
        offset += 4 + 12 * count
    return offset + 4 + 12 * command_index


@pytest.fixture
def locked_bytes():
    return build_file(
        [
            (0x6000, [MOVE_PSR20, EQ_IMM, JUMP_TITLE, MOVE_PSR19, EQ_IMM, JUMP_TITLE]),
            (0x8000, [JUMP_TITLE, NOP]),
        ]
    )
