"""Immutable in-memory model of a decoded MovieObject.bdmv."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Tuple, Union

from .protocol import (
    COMMAND_LEN,
    FLAG_MENU_CALL_MASK,
    FLAG_RESERVED_MASK,
    FLAG_RESUME_INTENTION,
    FLAG_TITLE_SEARCH_MASK,
    GPR_COUNT,
    GROUP_BRANCH,
    GROUP_COMPARE,
    GROUP_SET,
    OBJECT_PREAMBLE_LEN,
    PSR_COUNT,
    PSR_FLAG,
    SEMANTIC_MASKS,
    TABLE_PREAMBLE_LEN,
    U32_MAX,
)


class OperandCount(IntEnum):
    NONE = 0
    DESTINATION_ONLY = 1
    DESTINATION_AND_SOURCE = 2


class Branch(Enum):
    NOP = "Nop"
    GOTO = "GoTo"
    BREAK = "Break"
    JUMP_OBJECT = "JumpObject"
    JUMP_TITLE = "JumpTitle"
    CALL_OBJECT = "CallObject"
    CALL_TITLE = "CallTitle"
    RESUME = "Resume"
    PLAY_LIST = "PlayList"
    PLAY_ITEM = "PlayItem"
    PLAY_MARK = "PlayMark"
    TERMINATE = "Terminate"
    LINK_ITEM = "LinkItem"
    LINK_MARK = "LinkMark"


class Compare(Enum):
    BC = "Bc"
    EQ = "Eq"
    NE = "Ne"
    GE = "Ge"
    GT = "Gt"
    LE = "Le"
    LT = "Lt"


class SetOp(Enum):
    MOVE = "Move"
    SWAP = "Swap"
    ADD = "Add"
    SUB = "Sub"
    MUL = "Mul"
    DIV = "Div"
    MOD = "Mod"
    RND = "Rnd"
    AND = "And"
    OR = "Or"
    XOR = "Xor"
    BITSET = "Bitset"
    BITCLR = "Bitclr"
    SHIFT_LEFT = "ShiftLeft"
    SHIFT_RIGHT = "ShiftRight"
    SET_STREAM = "SetStream"
    SET_NV_TIMER = "SetNVTimer"
    BUTTON_PAGE = "ButtonPage"
    ENABLE_BUTTON = "EnableButton"
    DISABLE_BUTTON = "DisableButton"
    SET_SECONDARY_STREAM = "SetSecondaryStream"
    POPUP_OFF = "PopupOff"
    STILL_ON = "StillOn"
    STILL_OFF = "StillOff"


Operation = Union[Branch, Compare, SetOp]

_GROUPS = {Branch: GROUP_BRANCH, Compare: GROUP_COMPARE, SetOp: GROUP_SET}
GROUP_NAMES = {GROUP_BRANCH: "Branch", GROUP_COMPARE: "Compare", GROUP_SET: "Set"}


def _check_u32(value: int, what: str) -> None:
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{what} {value:#x} does not fit in 32 bits")


@dataclass(frozen=True)
class Immediate:
    value: int

    is_immediate = True
    kind = "imm"

    def __post_init__(self):
        _check_u32(self.value, "immediate")

    @property
    def encoded(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:#x}"


@dataclass(frozen=True)
class Gpr:
    """A general-purpose register. Valid numbers are 0 to 4095, inclusive.

    0-999: unreserved
    1000-1999: current audio, subtitle and chapter number for each playlist
    2000-3999: current play time for the resume feature for each playlist
    4001: sound FX on or off
    4003: 3D mode
    4005: "top menu" pressed flag
    4091-4095: reserved for BD-J code
    """

    number: int

    is_immediate = False
    kind = "gpr"

    def __post_init__(self):
        if not 0 <= self.number < GPR_COUNT:
            raise ValueError(f"GPR number {self.number} out of range")

    @property
    def encoded(self) -> int:
        return self.number

    def __str__(self) -> str:
        return f"GPR{self.number}"


@dataclass(frozen=True)
class Psr:
    """A player-specific register. Valid numbers are 0 to 127, inclusive.

    Notable entries: 4 title number, 5 chapter number, 6 playlist ID,
    13 parental level, 19 country code (read-only), 20 region code
    (read-only), 31 player profile and version. Many others are reserved and
    are treated opaquely.
    """

    number: int

    is_immediate = False
    kind = "psr"

    def __post_init__(self):
        if not 0 <= self.number < PSR_COUNT:
            raise ValueError(f"PSR number {self.number} out of range")

    @property
    def encoded(self) -> int:
        return PSR_FLAG | self.number

    def __str__(self) -> str:
        return f"PSR{self.number}"


@dataclass(frozen=True)
class UnknownRegister:
    """A register reference outside both the GPR and PSR ranges.

    ``value`` is the full raw 32-bit operand so that it round-trips.
    """

    value: int

    is_immediate = False
    kind = "unknown"

    def __post_init__(self):
        _check_u32(self.value, "register")
        if self.value & PSR_FLAG:
            if self.value & ~PSR_FLAG < PSR_COUNT:
                raise ValueError(f"register {self.value:#x} is a valid PSR")
        elif self.value < GPR_COUNT:
            raise ValueError(f"register {self.value:#x} is a valid GPR")

    @property
    def encoded(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"REG?{self.value:#x}"


Operand = Union[Immediate, Gpr, Psr, UnknownRegister]


def register_operand(value: int) -> Operand:
    """Classify a raw register reference."""
    if value & PSR_FLAG:
        if value & ~PSR_FLAG < PSR_COUNT:
            return Psr(value & ~PSR_FLAG)
        return UnknownRegister(value)
    if value < GPR_COUNT:
        return Gpr(value)
    return UnknownRegister(value)


def make_operand(value: int, is_immediate: bool) -> Operand:
    if is_immediate:
        return Immediate(value)
    return register_operand(value)


@dataclass(frozen=True)
class NavigationCommand:
    operand_count: OperandCount
    operation: Operation
    destination: Operand
    source: Operand
    # Opcode-word bits this group's classification ignores.
    opaque: int = 0
    raw: bytes | None = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if type(self.operation) not in _GROUPS:
            raise ValueError(f"unknown operation {self.operation!r}")
        _check_u32(self.opaque, "opaque bits")
        if self.opaque & SEMANTIC_MASKS[self.group]:
            raise ValueError(f"opaque bits {self.opaque:#010x} overlap {self.group_name} opcode fields")
        if self.raw is not None and len(self.raw) != COMMAND_LEN:
            raise ValueError(f"raw command must be {COMMAND_LEN} bytes, got {len(self.raw)}")

    @property
    def group(self) -> int:
        return _GROUPS[type(self.operation)]

    @property
    def group_name(self) -> str:
        return GROUP_NAMES[self.group]

    def with_operands(self, destination: Operand | None = None, source: Operand | None = None) -> "NavigationCommand":
        """Return a rewritten copy. The copy no longer carries raw bytes."""
        return replace(
            self,
            destination=self.destination if destination is None else destination,
            source=self.source if source is None else source,
            raw=None,
        )

    def __str__(self) -> str:
        text = f"{self.group_name}/{self.operation.value}"
        if self.operand_count >= OperandCount.DESTINATION_ONLY:
            text += f" {self.destination}"
        if self.operand_count >= OperandCount.DESTINATION_AND_SOURCE:
            text += f", {self.source}"
        return text


@dataclass(frozen=True)
class MovieObject:
    resume_intention: bool
    menu_call_mask: bool
    title_search_mask: bool
    commands: Tuple[NavigationCommand, ...] = ()
    reserved_flags: int = 0

    def __post_init__(self):
        object.__setattr__(self, "commands", tuple(self.commands))
        if self.reserved_flags & ~FLAG_RESERVED_MASK:
            raise ValueError(f"reserved flag bits {self.reserved_flags:#x} out of range")

    @classmethod
    def from_flags(cls, flags: int, commands=()) -> "MovieObject":
        return cls(
            resume_intention=bool(flags & FLAG_RESUME_INTENTION),
            menu_call_mask=bool(flags & FLAG_MENU_CALL_MASK),
            title_search_mask=bool(flags & FLAG_TITLE_SEARCH_MASK),
            commands=commands,
            reserved_flags=flags & FLAG_RESERVED_MASK,
        )

    @property
    def flags(self) -> int:
        word = self.reserved_flags
        if self.resume_intention:
            word |= FLAG_RESUME_INTENTION
        if self.menu_call_mask:
            word |= FLAG_MENU_CALL_MASK
        if self.title_search_mask:
            word |= FLAG_TITLE_SEARCH_MASK
        return word

    def byte_length(self) -> int:
        return OBJECT_PREAMBLE_LEN + COMMAND_LEN * len(self.commands)


@dataclass(frozen=True)
class Header:
    extension_start: int = 0
    reserved: bytes = bytes(28)
    table_length: int = TABLE_PREAMBLE_LEN
    table_reserved: bytes = bytes(4)
    object_count: int = 0

    def __post_init__(self):
        _check_u32(self.extension_start, "extension start address")
        _check_u32(self.table_length, "movie objects length")
        if len(self.reserved) != 28:
            raise ValueError("header reserved field must be 28 bytes")
        if len(self.table_reserved) != 4:
            raise ValueError("movie objects reserved field must be 4 bytes")
        if not 0 <= self.object_count <= 0xFFFF:
            raise ValueError(f"movie object count {self.object_count} does not fit in 16 bits")


@dataclass(frozen=True)
class MovieObjectFile:
    header: Header
    objects: Tuple[MovieObject, ...] = ()
    extension_data: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "objects", tuple(self.objects))
        if self.header.object_count != len(self.objects):
            raise ValueError(
                f"movie objects count is {self.header.object_count} but {len(self.objects)} objects were given"
            )

    def computed_table_length(self) -> int:
        return TABLE_PREAMBLE_LEN + sum(obj.byte_length() for obj in self.objects)

    def iter_commands(self):
        """Yield ``(object_index, command_index, command)`` in file order."""
        for i, obj in enumerate(self.objects):
            for j, command in enumerate(obj.commands):
                yield i, j, command
