import json
from pathlib import Path
from typing import List

import typer

from abi_engine.app.infrastructure.abi_document.loader import load_abi
from abi_engine.app.infrastructure.registry.event_registry import EventRegistry


PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_OUTPUT = PROJECT_ROOT / "event_signatures.json"


def seed_event_signatures(abi_paths: list[Path], output: Path) -> int:
    """
    Merge the event signatures of several ABI files into one topic0 table.

    Existing rows in `output` are kept; a topic0 already present is not
    overwritten.
    """
    table: dict[str, dict[str, str]] = {}
    if output.exists():
        for row in json.loads(output.read_text(encoding="utf-8")):
            table[row["topic0"]] = row

    for abi_path in abi_paths:
        registry = EventRegistry.from_abi(load_abi(abi_path))
        for row in registry.signatures():
            topic0 = "0x" + row.topic0.hex()
            table.setdefault(
                topic0,
                {
                    "topic0": topic0,
                    "event_name": row.event_name,
                    "event_signature": row.event_signature,
                },
            )

    rows = sorted(table.values(), key=lambda r: (r["event_name"], r["event_signature"]))
    output.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
    return len(rows)


def main(
    abi: List[Path] = typer.Argument(..., help="ABI JSON files (list or artifact)"),
    output: Path = typer.Option(DEFAULT_OUTPUT, "--output", help="topic0 table to create or extend"),
) -> None:
    """Build a topic0 -> event signature table."""
    count = seed_event_signatures(abi, output)
    typer.echo(f"{count} event signatures written to {output}")


if __name__ == "__main__":
    typer.run(main)
