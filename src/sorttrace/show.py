"""
Print the recorded trace of one run as a table.

Usage:
    python -m sorttrace.show --strategy hybrid --size 20 --seed 7
    python -m sorttrace.show --strategy insertion --values "5, 3, 8, 1"
    python -m sorttrace.show --size 30 --jsonl trace.jsonl

Array cells are colored: yellow for highlighted indices, green for indices
already in their sorted position.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
from rich.console import Console
from rich.table import Table

from sorttrace.datasets.generators import DEFAULT_MAX_VALUE, DEFAULT_MIN_VALUE, generate_random_array
from sorttrace.engine import ActiveAlgorithm, Step, Strategy, sort
from sorttrace.inputs import parse_custom_array_strict
from sorttrace.logging_config import setup_logging

logger = logging.getLogger(__name__)

_TAG_STYLES = {
    ActiveAlgorithm.QUICKSORT: "magenta",
    ActiveAlgorithm.INSERTION: "cyan",
    ActiveAlgorithm.COMPLETE: "bold green",
}


def render_array(step: Step) -> str:
    cells = []
    for idx, value in enumerate(step.array):
        if idx in step.comparing:
            cells.append(f"[bold yellow]{value}[/]")
        elif idx in step.sorted:
            cells.append(f"[green]{value}[/]")
        else:
            cells.append(str(value))
    return "[" + ", ".join(cells) + "]"


def build_table(steps: Sequence[Step], limit: Optional[int] = None) -> Table:
    table = Table(title=f"{len(steps)} steps")
    table.add_column("#", justify="right")
    table.add_column("Phase")
    table.add_column("Array")
    table.add_column("Cmp", justify="right")
    table.add_column("Swp", justify="right")
    table.add_column("Message")

    shown = steps if limit is None else steps[:limit]
    for k, step in enumerate(shown):
        tag = step.active_algorithm
        table.add_row(
            str(k),
            f"[{_TAG_STYLES[tag]}]{tag.value}[/]",
            render_array(step),
            str(step.stats.comparisons),
            str(step.stats.swaps),
            step.message,
        )
    if limit is not None and len(steps) > limit:
        table.caption = f"{len(steps) - limit} more steps not shown"
    return table


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Show the step-by-step trace of a sort.")
    p.add_argument("--strategy", default=Strategy.HYBRID.value, choices=[s.value for s in Strategy])
    src = p.add_mutually_exclusive_group()
    src.add_argument("--size", type=int, default=20, help="Random array length (default: 20)")
    src.add_argument("--values", type=str, help='Comma-separated integers, e.g. "5,3,8,1"')
    p.add_argument("--seed", type=int, default=None, help="Seed for the random array")
    p.add_argument("--min", dest="min_value", type=int, default=DEFAULT_MIN_VALUE)
    p.add_argument("--max", dest="max_value", type=int, default=DEFAULT_MAX_VALUE)
    p.add_argument("--limit", type=int, default=None, help="Show at most this many steps")
    p.add_argument("--jsonl", type=str, default=None, help="Also write the steps as JSON lines")
    p.add_argument("--log-level", default="WARNING")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level)
    if console is None:
        console = Console()

    try:
        if args.values is not None:
            values = parse_custom_array_strict(args.values)
        else:
            rng = np.random.default_rng(args.seed)
            values = generate_random_array(args.size, args.min_value, args.max_value, rng)
    except ValueError as e:
        console.print(f"[bold red]Invalid input:[/bold red] {e}")
        return 2

    logger.info("running %s on %d values", args.strategy, len(values))
    steps = sort(values, args.strategy)

    console.print(build_table(steps, args.limit))
    final = steps[-1]
    console.print(
        f"[bold]{args.strategy}[/bold]: {len(steps)} steps, "
        f"{final.stats.comparisons} comparisons, {final.stats.swaps} swaps"
    )

    if args.jsonl:
        path = Path(args.jsonl)
        with path.open("w", encoding="utf-8") as f:
            for step in steps:
                f.write(json.dumps(step.to_dict(), separators=(",", ":")))
                f.write("\n")
        console.print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
