"""Patch engine: apply no-op and register-override edits to a decoded file.

Patching never mutates its input. It builds a new MovieObjectFile in which
untouched commands keep their original raw bytes and only edited commands are
re-encoded, so the output differs from the input exactly where an edit
applied.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Tuple

from mobj_codec.commands import decode_command
from mobj_codec.table import decode_file, encode_file
from mobj_core.errors import PatchLocationError, PatchSizeError
from mobj_core.model import Immediate, MovieObjectFile, NavigationCommand, OperandCount, Psr
from mobj_core.protocol import COMMAND_LEN, PSR_COUNT

NOP_COMMAND_BYTES = bytes(COMMAND_LEN)


@dataclass(frozen=True, order=True)
class CommandLocation:
    object_index: int
    command_index: int

    @classmethod
    def parse(cls, text: str) -> "CommandLocation":
        """Parse ``"<movie object index>,<navigation command index>"``."""
        first, sep, second = text.partition(",")
        if not sep:
            raise ValueError("missing comma")
        try:
            object_index = int(first)
        except ValueError as e:
            raise ValueError("invalid movie object index") from e
        try:
            command_index = int(second)
        except ValueError as e:
            raise ValueError("invalid navigation command index") from e
        if object_index < 0 or command_index < 0:
            raise ValueError("indices must not be negative")
        return cls(object_index, command_index)

    def __str__(self) -> str:
        return f"{self.object_index},{self.command_index}"


@dataclass(frozen=True)
class RegisterOverride:
    """Replace reads of PSR ``psr`` with the constant ``value`` (4 bytes, big-endian)."""

    psr: int
    value: bytes

    def __post_init__(self):
        if not 0 <= self.psr < PSR_COUNT:
            raise ValueError(f"PSR number {self.psr} out of range")
        if len(self.value) != 4:
            raise ValueError(f"override value must be 4 bytes, got {len(self.value)}")

    @property
    def immediate(self) -> Immediate:
        return Immediate(int.from_bytes(self.value, "big"))


@dataclass(frozen=True)
class PatchSet:
    nops: FrozenSet[CommandLocation] = field(default_factory=frozenset)
    overrides: Tuple[RegisterOverride, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "nops", frozenset(self.nops))
        object.__setattr__(self, "overrides", tuple(self.overrides))

    def override_for(self, psr: int) -> RegisterOverride | None:
        # Later entries win, matching command-line order.
        for override in reversed(self.overrides):
            if override.psr == psr:
                return override
        return None


def nop_command() -> NavigationCommand:
    return decode_command(NOP_COMMAND_BYTES)


def patch_command(command: NavigationCommand, location: CommandLocation, patches: PatchSet) -> NavigationCommand:
    """Return the command to write at ``location``."""
    if location in patches.nops:
        return nop_command()

    # PSR19 and PSR20 are read-only, so only the source operand is rewritten.
    if command.operand_count == OperandCount.DESTINATION_AND_SOURCE and isinstance(command.source, Psr):
        override = patches.override_for(command.source.number)
        if override is not None:
            return command.with_operands(source=override.immediate)
    return command


def apply_patches(mobj: MovieObjectFile, patches: PatchSet) -> MovieObjectFile:
    for location in sorted(patches.nops):
        if location.object_index >= len(mobj.objects) or location.command_index >= len(
            mobj.objects[location.object_index].commands
        ):
            raise PatchLocationError(location.object_index, location.command_index)

    objects = []
    for i, obj in enumerate(mobj.objects):
        commands = tuple(
            patch_command(command, CommandLocation(i, j), patches) for j, command in enumerate(obj.commands)
        )
        objects.append(replace(obj, commands=commands))
    return replace(mobj, objects=tuple(objects))


def patch_bytes(data: bytes, patches: PatchSet) -> bytes:
    """Decode ``data``, apply ``patches`` and re-encode."""
    out = encode_file(apply_patches(decode_file(data), patches))
    if len(out) != len(data):
        raise PatchSizeError(len(data), len(out))
    return out
