"""Navigation command decoder and encoder.

A command is 96 bits: a 32-bit opcode word followed by the destination and
source operands, all big-endian::

    byte 0  arity(3) | group(2) | sub_group(3)
    byte 1  dst_imm(1) | src_imm(1) | unused(2) | branch_option(4)
    byte 2  unused(4) | compare_option(4)
    byte 3  unused(3) | set_option(5)
    4..7    destination
    8..11   source

Bits a group's classification ignores are kept in ``NavigationCommand.opaque``
so that ``encode_command(decode_command(raw)) == raw`` holds for every record
the decoder accepts.
"""
from __future__ import annotations

import struct

from mobj_core.errors import BadOperandCountError, InvalidCommandError, TruncatedCommandError
from mobj_core.model import NavigationCommand, OperandCount, make_operand
from mobj_core.protocol import (
    COMMAND_FMT,
    COMMAND_LEN,
    DESTINATION_IMMEDIATE_BIT,
    OPERAND_COUNT_SHIFT,
    SEMANTIC_MASKS,
    SOURCE_IMMEDIATE_BIT,
    U32_MAX,
)

from .opcodes import classify, opcode_bits


def decode_command(raw: bytes, object_index: int | None = None, command_index: int | None = None) -> NavigationCommand:
    """Decode one 12-byte record.

    The indices are only used to locate the record in error messages.
    """
    raw = bytes(raw)
    if len(raw) < COMMAND_LEN:
        raise TruncatedCommandError(object_index, command_index)
    if len(raw) > COMMAND_LEN:
        raise ValueError(f"navigation command must be {COMMAND_LEN} bytes, got {len(raw)}")

    operand_count = (raw[0] >> 5) & 0x7
    if operand_count > OperandCount.DESTINATION_AND_SOURCE:
        raise BadOperandCountError(operand_count, object_index, command_index)

    group = (raw[0] >> 3) & 0x3
    sub_group = raw[0] & 0x7
    branch_option = raw[1] & 0xF
    compare_option = raw[2] & 0xF
    set_option = raw[3] & 0x1F

    operation = classify(group, sub_group, branch_option, compare_option, set_option)
    if operation is None:
        raise InvalidCommandError(raw, object_index, command_index)

    word, destination, source = struct.unpack(COMMAND_FMT, raw)
    return NavigationCommand(
        operand_count=OperandCount(operand_count),
        operation=operation,
        destination=make_operand(destination, bool(word & DESTINATION_IMMEDIATE_BIT)),
        source=make_operand(source, bool(word & SOURCE_IMMEDIATE_BIT)),
        opaque=word & ~SEMANTIC_MASKS[group] & U32_MAX,
        raw=raw,
    )


def encode_command(command: NavigationCommand) -> bytes:
    """Build the canonical 12 bytes from the structured fields."""
    word = int(command.operand_count) << OPERAND_COUNT_SHIFT
    word |= opcode_bits(command.operation)
    word |= command.opaque
    if command.destination.is_immediate:
        word |= DESTINATION_IMMEDIATE_BIT
    if command.source.is_immediate:
        word |= SOURCE_IMMEDIATE_BIT
    return struct.pack(COMMAND_FMT, word, command.destination.encoded, command.source.encoded)


def encode_raw(raw: bytes) -> bytes:
    """Pass a record through without reinterpreting it."""
    if len(raw) != COMMAND_LEN:
        raise ValueError(f"navigation command must be {COMMAND_LEN} bytes, got {len(raw)}")
    return bytes(raw)


def command_bytes(command: NavigationCommand) -> bytes:
    """Bytes to write for ``command``: its original record if it has one."""
    if command.raw is not None:
        return encode_raw(command.raw)
    return encode_command(command)
