from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from mobj_core.model import MovieObjectFile

from .commands import command_bytes

SCHEMA = pa.schema(
    [
        ("object_index", pa.int32()),
        ("command_index", pa.int32()),
        ("resume_intention", pa.bool_()),
        ("menu_call_mask", pa.bool_()),
        ("title_search_mask", pa.bool_()),
        ("operand_count", pa.int32()),
        ("group", pa.string()),
        ("operation", pa.string()),
        ("destination_kind", pa.string()),
        ("destination_value", pa.int64()),
        ("source_kind", pa.string()),
        ("source_value", pa.int64()),
        ("raw", pa.string()),
    ]
)


def _operand_value(operand) -> int:
    # Registers are reported by number, immediates and unknowns by raw value.
    if operand.kind in ("gpr", "psr"):
        return operand.number
    return operand.value


def commands_frame(mobj: MovieObjectFile) -> pd.DataFrame:
    """One row per navigation command, in file order."""
    rows: list[dict] = []
    for i, j, command in mobj.iter_commands():
        obj = mobj.objects[i]
        rows.append(
            {
                "object_index": i,
                "command_index": j,
                "resume_intention": obj.resume_intention,
                "menu_call_mask": obj.menu_call_mask,
                "title_search_mask": obj.title_search_mask,
                "operand_count": int(command.operand_count),
                "group": command.group_name,
                "operation": command.operation.value,
                "destination_kind": command.destination.kind,
                "destination_value": _operand_value(command.destination),
                "source_kind": command.source.kind,
                "source_value": _operand_value(command.source),
                "raw": command_bytes(command).hex(),
            }
        )
    return pd.DataFrame(rows, columns=SCHEMA.names)


def export_commands(mobj: MovieObjectFile, out_path: Path) -> int:
    """Write the command listing to Parquet. Returns the number of rows."""
    df = commands_frame(mobj)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    if df.empty:
        table = SCHEMA.empty_table()
    else:
        table = pa.Table.from_pandas(df, schema=SCHEMA, preserve_index=False)
    pq.write_table(table, Path(out_path))
    return len(df)
