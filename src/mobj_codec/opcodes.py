"""Opcode map for HDMV navigation commands.

This table is the single source of truth for classifying a command. Keys are
``(group, sub_group, branch_option, compare_option, set_option)``; ``ANY``
marks a field the group does not look at.

Based on https://github.com/lw/BluRay/wiki/NavigationCommand and
https://forum.doom9.org/showthread.php?p=1423615
"""
from __future__ import annotations

from typing import Optional

from mobj_core.model import Branch, Compare, Operation, SetOp
from mobj_core.protocol import (
    BRANCH_OPTION_SHIFT,
    COMPARE_OPTION_SHIFT,
    GROUP_SHIFT,
    SET_OPTION_SHIFT,
    SUB_GROUP_SHIFT,
)

ANY = None

OPCODES = (
    ((0, 0, 0, ANY, ANY), Branch.NOP),
    ((0, 0, 1, ANY, ANY), Branch.GOTO),
    ((0, 0, 2, ANY, ANY), Branch.BREAK),
    ((0, 1, 0, ANY, ANY), Branch.JUMP_OBJECT),
    ((0, 1, 1, ANY, ANY), Branch.JUMP_TITLE),
    ((0, 1, 2, ANY, ANY), Branch.CALL_OBJECT),
    ((0, 1, 3, ANY, ANY), Branch.CALL_TITLE),
    ((0, 1, 4, ANY, ANY), Branch.RESUME),
    ((0, 2, 0, ANY, ANY), Branch.PLAY_LIST),
    ((0, 2, 1, ANY, ANY), Branch.PLAY_ITEM),
    ((0, 2, 2, ANY, ANY), Branch.PLAY_MARK),
    ((0, 2, 3, ANY, ANY), Branch.TERMINATE),
    ((0, 2, 4, ANY, ANY), Branch.LINK_ITEM),
    ((0, 2, 5, ANY, ANY), Branch.LINK_MARK),
    ((1, ANY, ANY, 1, ANY), Compare.BC),
    ((1, ANY, ANY, 2, ANY), Compare.EQ),
    ((1, ANY, ANY, 3, ANY), Compare.NE),
    ((1, ANY, ANY, 4, ANY), Compare.GE),
    ((1, ANY, ANY, 5, ANY), Compare.GT),
    ((1, ANY, ANY, 6, ANY), Compare.LE),
    ((1, ANY, ANY, 7, ANY), Compare.LT),
    ((2, 0, ANY, ANY, 0x1), SetOp.MOVE),
    ((2, 0, ANY, ANY, 0x2), SetOp.SWAP),
    ((2, 0, ANY, ANY, 0x3), SetOp.ADD),
    ((2, 0, ANY, ANY, 0x4), SetOp.SUB),
    ((2, 0, ANY, ANY, 0x5), SetOp.MUL),
    ((2, 0, ANY, ANY, 0x6), SetOp.DIV),
    ((2, 0, ANY, ANY, 0x7), SetOp.MOD),
    ((2, 0, ANY, ANY, 0x8), SetOp.RND),
    ((2, 0, ANY, ANY, 0x9), SetOp.AND),
    ((2, 0, ANY, ANY, 0xA), SetOp.OR),
    ((2, 0, ANY, ANY, 0xB), SetOp.XOR),
    ((2, 0, ANY, ANY, 0xC), SetOp.BITSET),
    ((2, 0, ANY, ANY, 0xD), SetOp.BITCLR),
    ((2, 0, ANY, ANY, 0xE), SetOp.SHIFT_LEFT),
    ((2, 0, ANY, ANY, 0xF), SetOp.SHIFT_RIGHT),
    ((2, 1, ANY, ANY, 0x1), SetOp.SET_STREAM),
    ((2, 1, ANY, ANY, 0x2), SetOp.SET_NV_TIMER),
    ((2, 1, ANY, ANY, 0x3), SetOp.BUTTON_PAGE),
    ((2, 1, ANY, ANY, 0x4), SetOp.ENABLE_BUTTON),
    ((2, 1, ANY, ANY, 0x5), SetOp.DISABLE_BUTTON),
    ((2, 1, ANY, ANY, 0x6), SetOp.SET_SECONDARY_STREAM),
    ((2, 1, ANY, ANY, 0x7), SetOp.POPUP_OFF),
    ((2, 1, ANY, ANY, 0x8), SetOp.STILL_ON),
    ((2, 1, ANY, ANY, 0x9), SetOp.STILL_OFF),
)

_PATTERNS = {operation: pattern for pattern, operation in OPCODES}
_SHIFTS = (GROUP_SHIFT, SUB_GROUP_SHIFT, BRANCH_OPTION_SHIFT, COMPARE_OPTION_SHIFT, SET_OPTION_SHIFT)


def classify(group: int, sub_group: int, branch_option: int, compare_option: int, set_option: int) -> Optional[Operation]:
    """Look up the operation for the extracted opcode fields, or None."""
    fields = (group, sub_group, branch_option, compare_option, set_option)
    for pattern, operation in OPCODES:
        if all(want is ANY or want == got for want, got in zip(pattern, fields)):
            return operation
    return None


def opcode_bits(operation: Operation) -> int:
    """Opcode-word bits selecting ``operation``; wildcard fields are zero."""
    word = 0
    for value, shift in zip(_PATTERNS[operation], _SHIFTS):
        if value is not ANY:
            word |= value << shift
    return word
