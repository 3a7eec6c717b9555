"""Query an exported command table - find reads of the country and region registers."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <commands.parquet> [psr ...]")
        print("Example: mobj-dump export disc/ commands.parquet && python query.py commands.parquet 19 20")
        sys.exit(1)

    table = Path(sys.argv[1])
    psrs = [int(a) for a in sys.argv[2:]] or [19, 20]

    con = duckdb.connect(":memory:")
    con.execute(f"CREATE VIEW commands AS SELECT * FROM '{table}'")

    # Region check query: any command that reads one of the PSRs as its source
    sql = f"""
    SELECT
        object_index,
        command_index,
        "group" || '/' || operation AS op,
        destination_kind,
        destination_value,
        source_value AS psr,
        raw
    FROM commands
    WHERE operand_count = 2
      AND source_kind = 'psr'
      AND source_value IN ({", ".join(str(p) for p in psrs)})
    ORDER BY object_index, command_index
    """

    print(f"--- PSR reads: {', '.join(str(p) for p in psrs)} ---\n")

    df = con.execute(sql).fetchdf()
    if df.empty:
        print("No region checks found.")
    else:
        for _, row in df.iterrows():
            print(f"#{row['object_index']}/{row['command_index']}: {row['op']}")
            print(f"  Destination: {row['destination_kind']} {row['destination_value']}")
            print(f"  Source: PSR{row['psr']}")
            print(f"  Raw: {row['raw']}")
            print()


if __name__ == "__main__":
    main()
