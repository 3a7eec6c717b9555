import pytest

from conftest import (
    EQ_IMM,
    JUMP_TITLE,
    MOVE_ONE_OPERAND,
    MOVE_PSR20,
    MOVE_TO_PSR20,
    NOP,
    build_file,
    record_offset,
)
from mobj_codec.table import decode_file, encode_file
from mobj_core.errors import PatchLocationError, PatchSizeError
from mobj_core.model import Branch, Gpr, Immediate, OperandCount, Psr, SetOp
from mobj_patch.engine import (
    NOP_COMMAND_BYTES,
    CommandLocation,
    PatchSet,
    RegisterOverride,
    apply_patches,
    patch_bytes,
)

LOCKED_SIZES = [6, 2]
REGION_1 = RegisterOverride(20, b"\x00\x00\x00\x01")


def _records(data, sizes):
    return {
        (i, j): data[record_offset(sizes, i, j) : record_offset(sizes, i, j) + 12]
        for i, count in enumerate(sizes)
        for j in range(count)
    }


def test_nop_patch_replaces_only_target(locked_bytes):
    out = patch_bytes(locked_bytes, PatchSet(nops={CommandLocation(0, 1)}))

    assert len(out) == len(locked_bytes)
    command = decode_file(out).objects[0].commands[1]
    assert command.operation == Branch.NOP
    assert command.operand_count == OperandCount.NONE
    assert command.destination == Gpr(0)
    assert command.source == Gpr(0)

    before = _records(locked_bytes, LOCKED_SIZES)
    after = _records(out, LOCKED_SIZES)
    assert after[(0, 1)] == NOP_COMMAND_BYTES
    for location, raw in before.items():
        if location != (0, 1):
            assert after[location] == raw
    assert out[:50] == locked_bytes[:50]


def test_override_rewrites_source_only():
    data = build_file([(0, [MOVE_PSR20])])
    out = patch_bytes(data, PatchSet(overrides=[REGION_1]))

    command = decode_file(out).objects[0].commands[0]
    assert command.operand_count == OperandCount.DESTINATION_AND_SOURCE
    assert command.operation == SetOp.MOVE
    assert command.destination == Gpr(1)
    assert command.source == Immediate(1)

    raw = out[54:66]
    assert raw[8:12] == b"\x00\x00\x00\x01"
    assert raw[1] == MOVE_PSR20[1] | 0x40
    assert raw[0] == MOVE_PSR20[0]
    assert raw[2:8] == MOVE_PSR20[2:8]


def test_override_keeps_opaque_bits():
    # Set/Move with unused bits set in bytes 1-3.
    record = bytes.fromhex("503ff0e10000000180000014")
    out = patch_bytes(build_file([(0, [record])]), PatchSet(overrides=[REGION_1]))
    assert out[54:66] == bytes.fromhex("507ff0e10000000100000001")


def test_override_applies_to_matching_register_only(locked_bytes):
    out = patch_bytes(locked_bytes, PatchSet(overrides=[REGION_1]))
    mobj = decode_file(out)
    assert mobj.objects[0].commands[0].source == Immediate(1)
    # PSR19 has no override.
    assert mobj.objects[0].commands[3].source == Psr(19)

    country = RegisterOverride(19, b"\x00\x00US")
    mobj = decode_file(patch_bytes(locked_bytes, PatchSet(overrides=[REGION_1, country])))
    assert mobj.objects[0].commands[3].source == Immediate(0x5553)


@pytest.mark.parametrize("record", [MOVE_TO_PSR20, MOVE_ONE_OPERAND, EQ_IMM, JUMP_TITLE])
def test_override_ignores_other_commands(record):
    data = build_file([(0, [record])])
    assert patch_bytes(data, PatchSet(overrides=[REGION_1])) == data


def test_nop_takes_precedence_over_override():
    data = build_file([(0, [MOVE_PSR20, MOVE_PSR20])])
    out = patch_bytes(data, PatchSet(nops=[CommandLocation(0, 0)], overrides=[REGION_1]))
    assert out[54:66] == NOP
    assert decode_file(out).objects[0].commands[1].source == Immediate(1)


def test_later_override_wins():
    patches = PatchSet(overrides=[REGION_1, RegisterOverride(20, b"\x00\x00\x00\x04")])
    out = patch_bytes(build_file([(0, [MOVE_PSR20])]), patches)
    assert decode_file(out).objects[0].commands[0].source == Immediate(4)


def test_apply_patches_does_not_mutate_input(locked_bytes):
    mobj = decode_file(locked_bytes)
    patched = apply_patches(mobj, PatchSet(nops={CommandLocation(1, 0)}, overrides=[REGION_1]))

    assert patched is not mobj
    assert mobj == decode_file(locked_bytes)
    assert encode_file(mobj) == locked_bytes
    assert patched.objects[1].commands[0].operation == Branch.NOP


def test_empty_patch_set_is_identity(locked_bytes):
    assert patch_bytes(locked_bytes, PatchSet()) == locked_bytes


def test_extension_data_survives_patching():
    data = build_file([(0, [MOVE_PSR20])], extension=b"\x00\x00\x00\x04TAIL")
    out = patch_bytes(data, PatchSet(overrides=[REGION_1]))
    assert out.endswith(b"\x00\x00\x00\x04TAIL")
    assert len(out) == len(data)


def test_size_change_fails_closed(monkeypatch, locked_bytes):
    monkeypatch.setattr("mobj_patch.engine.encode_file", lambda mobj: encode_file(mobj)[:-1])

    with pytest.raises(PatchSizeError, match="Patched file size changed") as exc:
        patch_bytes(locked_bytes, PatchSet(overrides=[REGION_1]))
    assert (exc.value.input_length, exc.value.output_length) == (len(locked_bytes), len(locked_bytes) - 1)


@pytest.mark.parametrize("location", [CommandLocation(2, 0), CommandLocation(1, 2), CommandLocation(0, 6)])
def test_unknown_nop_location_is_rejected(locked_bytes, location):
    with pytest.raises(PatchLocationError) as exc:
        patch_bytes(locked_bytes, PatchSet(nops={location}))
    assert (exc.value.object_index, exc.value.command_index) == (location.object_index, location.command_index)


def test_command_location_parse():
    assert CommandLocation.parse("0,3") == CommandLocation(0, 3)
    assert str(CommandLocation.parse("12,40")) == "12,40"
    for text, message in [
        ("03", "missing comma"),
        ("a,1", "invalid movie object index"),
        ("1,b", "invalid navigation command index"),
        ("1,-2", "negative"),
    ]:
        with pytest.raises(ValueError, match=message):
            CommandLocation.parse(text)


def test_register_override_validation():
    with pytest.raises(ValueError):
        RegisterOverride(20, b"\x00\x01")
    with pytest.raises(ValueError):
        RegisterOverride(128, b"\x00\x00\x00\x01")
    assert RegisterOverride(19, b"\x00\x00JP").immediate == Immediate(0x4A50)


def test_patch_set_override_lookup():
    patches = PatchSet(overrides=[RegisterOverride(19, b"\x00\x00US")])
    assert patches.override_for(19).value == b"\x00\x00US"
    assert patches.override_for(20) is None
