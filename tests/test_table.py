import warnings

import pytest

from conftest import EQ_IMM, JUMP_TITLE, MOVE_PSR19, MOVE_PSR20, NOP, build_file
from mobj_codec.commands import encode_command
from mobj_codec.table import decode_file, encode_file, read_file
from mobj_core.errors import (
    BadMagicError,
    BadOperandCountError,
    InvalidCommandError,
    MovieObjectIOError,
    TruncatedCommandError,
    TruncatedObjectError,
)
from mobj_core.model import Branch, Gpr, Header, Immediate, MovieObject, MovieObjectFile, OperandCount


def test_single_command_file_round_trips():
    record = bytes.fromhex("204000000000001300000000")
    data = build_file([(0x0000, [record])])

    mobj = decode_file(data)

    assert len(mobj.objects) == 1
    obj = mobj.objects[0]
    assert (obj.resume_intention, obj.menu_call_mask, obj.title_search_mask) == (False, False, False)
    assert len(obj.commands) == 1
    command = obj.commands[0]
    assert command.operation == Branch.NOP
    assert command.operand_count == OperandCount.DESTINATION_ONLY
    assert command.destination == Gpr(19)
    assert command.source == Immediate(0)
    assert encode_command(command) == record
    assert encode_file(mobj) == data


@pytest.mark.parametrize(
    "flags,expected",
    [
        (0x0000, (False, False, False)),
        (0x8000, (True, False, False)),
        (0x4000, (False, True, False)),
        (0x2000, (False, False, True)),
        (0xE000, (True, True, True)),
    ],
)
def test_object_flags(flags, expected):
    obj = decode_file(build_file([(flags, [])])).objects[0]
    assert (obj.resume_intention, obj.menu_call_mask, obj.title_search_mask) == expected
    assert obj.flags == flags


def test_reserved_flag_bits_are_preserved():
    data = build_file([(0xA005, [NOP])])
    obj = decode_file(data).objects[0]
    assert obj.reserved_flags == 0x0005
    assert obj.flags == 0xA005
    assert encode_file(decode_file(data)) == data


def test_container_round_trips_field_for_field():
    data = build_file(
        [
            (0x6000, [MOVE_PSR20, EQ_IMM, JUMP_TITLE]),
            (0x0000, []),
            (0x8000, [MOVE_PSR19, NOP]),
        ],
        extension_start=0x88,
        reserved=bytes(range(28)),
        table_reserved=b"\xaa\xbb\xcc\xdd",
        extension=b"\x00\x00\x00\x08EXTDATA!",
    )

    mobj = decode_file(data)
    encoded = encode_file(mobj)

    assert encoded == data
    again = decode_file(encoded)
    assert again == mobj
    assert again.header.reserved == bytes(range(28))
    assert again.extension_data == b"\x00\x00\x00\x08EXTDATA!"


def test_commands_are_yielded_in_file_order():
    mobj = decode_file(build_file([(0, [MOVE_PSR20, EQ_IMM]), (0, []), (0, [JUMP_TITLE])]))
    assert [(i, j) for i, j, _ in mobj.iter_commands()] == [(0, 0), (0, 1), (2, 0)]


def test_constructed_model_encodes():
    mobj = decode_file(build_file([(0x2000, [MOVE_PSR20])]))
    rebuilt = MovieObject(
        resume_intention=False,
        menu_call_mask=False,
        title_search_mask=True,
        commands=[c.with_operands() for c in mobj.objects[0].commands],
    )
    assert rebuilt.commands[0].raw is None
    assert encode_file(MovieObjectFile(mobj.header, (rebuilt,))) == build_file([(0x2000, [MOVE_PSR20])])


def test_object_count_must_match_objects():
    mobj = decode_file(build_file([(0, [MOVE_PSR20])]))

    with pytest.raises(ValueError, match="movie objects count is 0 but 1 objects"):
        MovieObjectFile(header=Header(), objects=mobj.objects)
    with pytest.raises(ValueError, match="movie objects count is 1 but 0 objects"):
        MovieObjectFile(header=mobj.header, objects=())

    rebuilt = MovieObjectFile(header=mobj.header, objects=mobj.objects)
    assert decode_file(encode_file(rebuilt)) == rebuilt


def _two_objects():
    return build_file([(0, [MOVE_PSR20]), (0, [EQ_IMM, JUMP_TITLE])])


def test_missing_flags_reports_object():
    data = _two_objects()
    cut = 50 + 4 + 12
    for length in (cut, cut + 1):
        with pytest.raises(TruncatedObjectError) as exc:
            decode_file(data[:length])
        assert exc.value.object_index == 1
        assert exc.value.field == "flags"


def test_missing_command_count_reports_object():
    data = _two_objects()
    with pytest.raises(TruncatedObjectError) as exc:
        decode_file(data[: 50 + 4 + 12 + 2])
    assert exc.value.object_index == 1
    assert exc.value.field == "navigation commands count"


def test_short_command_reports_indices():
    data = _two_objects()
    with pytest.raises(TruncatedCommandError) as exc:
        decode_file(data[:-1])
    assert (exc.value.object_index, exc.value.command_index) == (1, 1)


def test_invalid_command_rejects_whole_file():
    bad = bytes.fromhex("180000000000000000000000")
    data = build_file([(0, [MOVE_PSR20]), (0, [EQ_IMM, bad])])
    with pytest.raises(InvalidCommandError) as exc:
        decode_file(data)
    assert (exc.value.object_index, exc.value.command_index) == (1, 1)
    assert exc.value.raw == bad


def test_bad_operand_count_carries_indices():
    bad = bytes.fromhex("e00000000000000000000000")
    with pytest.raises(BadOperandCountError) as exc:
        decode_file(build_file([(0, [bad])]))
    assert (exc.value.object_index, exc.value.command_index, exc.value.operand_count) == (0, 0, 7)


def test_bad_magic_stops_decoding():
    data = b"XXXX0200" + build_file([(0, [MOVE_PSR20])])[8:]
    with pytest.raises(BadMagicError) as exc:
        decode_file(data)
    assert exc.value.actual == b"XXXX0200"


def test_table_length_mismatch_warns_and_is_preserved():
    data = build_file([(0, [MOVE_PSR20])], table_length=999)
    with pytest.warns(UserWarning, match="Movie objects length"):
        mobj = decode_file(data)
    assert mobj.header.table_length == 999
    assert mobj.computed_table_length() == 6 + 4 + 12
    assert encode_file(mobj) == data


def test_consistent_table_length_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        decode_file(build_file([(0, [MOVE_PSR20, NOP])]))


def test_read_file_from_disc_root(tmp_path):
    data = build_file([(0, [MOVE_PSR20])])
    bdmv = tmp_path / "BDMV"
    bdmv.mkdir()
    (bdmv / "MovieObject.bdmv").write_bytes(data)

    assert read_file(tmp_path) == decode_file(data)
    assert read_file(bdmv / "MovieObject.bdmv") == decode_file(data)


def test_read_file_reports_path(tmp_path):
    with pytest.raises(MovieObjectIOError) as exc:
        read_file(tmp_path / "missing.bdmv")
    assert exc.value.path == tmp_path / "missing.bdmv"
    assert isinstance(exc.value.__cause__, OSError)
    assert exc.value.code == "E_IO"
