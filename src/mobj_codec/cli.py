from pathlib import Path

import click

from mobj_core.errors import MovieObjectError
from .commands import command_bytes
from .export import export_commands
from .table import read_file, resolve_path


def _load(path: Path):
    try:
        return read_file(path)
    except MovieObjectError as e:
        # Fail closed with a single-line reason.
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)


@click.group()
def main():
    """Inspect MovieObject.bdmv navigation commands."""


@main.command("dump")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def dump_cmd(path: Path):
    """Print the header and every navigation command."""
    mobj = _load(path)
    header = mobj.header
    click.echo(f"file: {resolve_path(path)}")
    click.echo(f"extension start address: {header.extension_start:#010x}")
    click.echo(f"movie objects length: {header.table_length} bytes")
    click.echo(f"movie objects count: {header.object_count}")
    for i, obj in enumerate(mobj.objects):
        click.echo(
            f"movie object #{i} flags: {obj.flags:#06x} "
            f"(resume_intention={obj.resume_intention}, menu_call_mask={obj.menu_call_mask}, "
            f"title_search_mask={obj.title_search_mask}) navigation commands: {len(obj.commands)}"
        )
        for j, command in enumerate(obj.commands):
            click.echo(f"movie object #{i} navigation command #{j} [{command_bytes(command).hex(' ')}] {command}")
    click.echo(f"movie object extension data: {len(mobj.extension_data)} bytes")


@main.command("export")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
def export_cmd(path: Path, out: Path):
    """Write every navigation command to a Parquet table."""
    mobj = _load(path)
    rows = export_commands(mobj, out)
    click.echo(f"PASS: {rows} navigation commands exported to {out}")


if __name__ == "__main__":
    main()
