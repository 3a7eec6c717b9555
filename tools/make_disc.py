"""Generate a synthetic disc tree with a MovieObject.bdmv for testing.

Usage:
    python tools/make_disc.py OUT_DIR [--locked] [--extension]
"""
from pathlib import Path

from mobj_codec.table import encode_file
from mobj_core.model import (
    Branch,
    Compare,
    Gpr,
    Header,
    Immediate,
    MovieObject,
    MovieObjectFile,
    NavigationCommand,
    OperandCount,
    Psr,
    SetOp,
)
from mobj_core.protocol import HEADER_LEN, MOVIE_OBJECT_PATH, PSR_COUNTRY, PSR_REGION, TABLE_PREAMBLE_LEN

NONE = OperandCount.NONE
DST = OperandCount.DESTINATION_ONLY
DST_SRC = OperandCount.DESTINATION_AND_SOURCE
ZERO = Gpr(0)


def cmd(count, operation, destination=ZERO, source=ZERO) -> NavigationCommand:
    return NavigationCommand(count, operation, destination, source)


def build_movie_objects(locked: bool = False, extension: bool = False) -> MovieObjectFile:
    if locked:
        first_play = [
            # Region check: PSR20 & 0x1 must be set (region A).
            cmd(DST_SRC, SetOp.MOVE, Gpr(1), Psr(PSR_REGION)),
            cmd(DST_SRC, SetOp.AND, Gpr(1), Immediate(0x1)),
            cmd(DST_SRC, Compare.EQ, Gpr(1), Immediate(0x0)),
            cmd(DST, Branch.JUMP_OBJECT, Immediate(1)),
            # Country check: PSR19 must be "US".
            cmd(DST_SRC, SetOp.MOVE, Gpr(2), Psr(PSR_COUNTRY)),
            cmd(DST_SRC, Compare.NE, Gpr(2), Immediate(0x5553)),
            cmd(DST, Branch.JUMP_OBJECT, Immediate(1)),
            cmd(DST, Branch.JUMP_TITLE, Immediate(1)),
        ]
    else:
        first_play = [
            cmd(DST_SRC, SetOp.MOVE, Gpr(1), Immediate(0)),
            cmd(DST, Branch.JUMP_TITLE, Immediate(1)),
        ]

    # Wrong-region warning screen.
    warning = [
        cmd(DST, Branch.PLAY_LIST, Immediate(99)),
        cmd(NONE, Branch.BREAK),
    ]
    title = [
        cmd(DST_SRC, SetOp.MOVE, Psr(4), Immediate(1)),
        cmd(DST, Branch.PLAY_LIST, Immediate(0)),
        cmd(NONE, Branch.NOP),
    ]

    objects = (
        MovieObject(resume_intention=False, menu_call_mask=True, title_search_mask=True, commands=first_play),
        MovieObject(resume_intention=False, menu_call_mask=True, title_search_mask=True, commands=warning),
        MovieObject(resume_intention=True, menu_call_mask=False, title_search_mask=False, commands=title),
    )
    draft = MovieObjectFile(header=Header(object_count=len(objects)), objects=objects)
    table_length = draft.computed_table_length()
    extension_data = b"\x00\x00\x00\x00" if extension else b""
    # table_length counts from the end of its own field; extension data follows the table.
    extension_start = HEADER_LEN - TABLE_PREAMBLE_LEN + table_length if extension else 0
    header = Header(
        extension_start=extension_start,
        table_length=table_length,
        object_count=len(objects),
    )
    return MovieObjectFile(header=header, objects=objects, extension_data=extension_data)


def generate_disc(out_dir, locked: bool = False, extension: bool = False) -> Path:
    root = Path(out_dir)
    mobj_path = root / MOVIE_OBJECT_PATH
    mobj_path.parent.mkdir(parents=True, exist_ok=True)
    (root / "CERTIFICATE").mkdir(exist_ok=True)
    mobj_path.write_bytes(encode_file(build_movie_objects(locked=locked, extension=extension)))
    print(f"GENERATED: {mobj_path}")
    return root


if __name__ == "__main__":
    import sys

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    locked, args = pop_flag(args, "--locked")
    extension, args = pop_flag(args, "--extension")

    out = args[0] if len(args) > 0 else "disc"
    generate_disc(out, locked=locked, extension=extension)
