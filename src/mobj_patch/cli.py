"""MOBJ Patch - test for and remove region checks in MovieObject.bdmv.

Blu-ray discs can perform region checks in MovieObject.bdmv or in BD-J; this
tool only handles the former.
"""
from __future__ import annotations

import hashlib
from pathlib import Path

import click

from mobj_codec.commands import command_bytes
from mobj_codec.table import encode_file, read_file
from mobj_core.errors import MovieObjectError, PatchSizeError

from .engine import CommandLocation, PatchSet, apply_patches
from .regions import Region, country_override, find_region_checks, parse_country, region_override


def _country(ctx, param, value):
    try:
        return parse_country(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _locations(ctx, param, values):
    locations = []
    for value in values:
        try:
            locations.append(CommandLocation.parse(value))
        except ValueError as e:
            raise click.BadParameter(f"{value!r}: {e}")
    return locations


@click.group()
def main():
    """Test or remove region checks on a Blu-ray disc."""


@main.command("test")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def test_cmd(path: Path):
    """Test if a disc is region or country locked.

    PATH is the disc root (the directory holding BDMV/) or MovieObject.bdmv.
    """
    try:
        mobj = read_file(path)
    except MovieObjectError as e:
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)

    checks = find_region_checks(mobj)
    for check in checks:
        prefix = "" if check.expected else "UNEXPECTED: "
        loc = check.location
        click.echo(
            f"{prefix}movie object #{loc.object_index} navigation command #{loc.command_index} {check.command}"
        )
    click.echo("LOCKED" if checks else "UNLOCKED")


@main.command("remove")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--region",
    required=True,
    type=click.Choice([r.name for r in Region]),
    help="What region to overwrite use of PSR 20 with.",
)
@click.option(
    "--country",
    required=True,
    callback=_country,
    help='What country to overwrite use of PSR 19 with, as an uppercase ISO 3166-1 alpha-2 code, e.g. "US".',
)
@click.option(
    "--nop-patch",
    multiple=True,
    callback=_locations,
    help="Navigation command to replace with a nop, as '<movie object index>,<navigation command index>'.",
)
def remove_cmd(path: Path, output_path: Path, region: str, country: str, nop_patch):
    """Remove region checks from a disc and save the new MovieObject.bdmv to OUTPUT_PATH."""
    patches = PatchSet(
        nops=nop_patch,
        overrides=(region_override(Region[region]), country_override(country)),
    )
    try:
        mobj = read_file(path)
        patched = apply_patches(mobj, patches)
        out = encode_file(patched)
        original_length = len(encode_file(mobj))
        if len(out) != original_length:
            raise PatchSizeError(original_length, len(out))
        # Never overwrite an existing file.
        with open(output_path, "xb") as f:
            f.write(out)
    except (MovieObjectError, OSError) as e:
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)

    changed = sum(
        1
        for before, after in zip(mobj.iter_commands(), patched.iter_commands())
        if command_bytes(before[2]) != command_bytes(after[2])
    )
    click.echo(f"PASS: wrote {output_path}")
    click.echo(f"  Navigation commands patched: {changed}")
    click.echo(f"  SHA-256: {hashlib.sha256(out).hexdigest()}")


if __name__ == "__main__":
    main()
