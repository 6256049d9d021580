"""
Experiment runner: compares the three strategies over a sweep of input sizes.

Usage (from repo root):
    python -m sorttrace.bench.runner experiments/configs/01_strategy_scaling.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per timed sample or failure
    - summary.csv             # per (strategy, n): steps, comparisons, swaps, median + IQR time
    - traces/*.jsonl          # full step logs, only with dump_traces: true
    - (console) rich/tqdm summaries

Design notes:
- For each size n, we generate ONE dataset and give the same input to every strategy.
- Every run is checked with `check_run` unless `validate: false`.
- On timeout/error/invalid trace for a strategy at size n, we skip larger sizes for it.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import logging
import os
import platform
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from sorttrace import __version__
from sorttrace.bench.measure import trace_sort_call
from sorttrace.datasets import make_dataset
from sorttrace.engine import Strategy
from sorttrace.logging_config import setup_logging
from sorttrace.validate import check_run

logger = logging.getLogger(__name__)
_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "strategies",
]
SUMMARY_COLUMNS = [
    "strategy", "n", "samples_ok", "steps", "comparisons", "swaps",
    "median_ns", "iqr_ns", "min_ns", "max_ns",
]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a YAML mapping")
    return cfg


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _write_jsonl(objs: Iterable[Dict[str, Any]], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        for obj in objs:
            f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
            f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    suffix = 1
    while run_dir.exists():
        # two runs inside the same second
        run_dir = base_dir / f"{_timestamp()}_{experiment_name}_{suffix}"
        suffix += 1
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "sorttrace": __version__,
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_strategies(cfg_strategies: List[Any]) -> List[Strategy]:
    resolved: List[Strategy] = []
    for entry in cfg_strategies:
        strategy = Strategy.parse(entry)
        if strategy in resolved:
            raise ValueError(f"Duplicate strategy in config: {strategy.value}")
        resolved.append(strategy)
    if not resolved:
        raise ValueError("Config 'strategies' must name at least one strategy")
    return resolved


def _resolve_sizes(cfg_sizes: List[Any]) -> List[int]:
    sizes: List[int] = []
    for n in cfg_sizes:
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValueError(f"Config 'sizes' entries must be nonnegative integers; got {n!r}")
        sizes.append(n)
    if not sizes:
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")
    return sizes


def _iqr(s: pd.Series) -> float:
    return s.quantile(0.75) - s.quantile(0.25)


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    empty = pd.DataFrame(columns=SUMMARY_COLUMNS)
    if not jsonl_path.exists():
        return empty
    df = pd.read_json(jsonl_path, lines=True)
    if "time_ns" not in df.columns:
        return empty
    df = df[df["time_ns"].notna()]
    if df.empty:
        return empty

    out = (
        df.groupby(["strategy", "n"], as_index=False)
        .agg(
            samples_ok=("time_ns", "count"),
            steps=("steps", "max"),
            comparisons=("comparisons", "max"),
            swaps=("swaps", "max"),
            median_ns=("time_ns", "median"),
            iqr_ns=("time_ns", _iqr),
            min_ns=("time_ns", "min"),
            max_ns=("time_ns", "max"),
        )
    )
    int_cols = ["n", "steps", "comparisons", "swaps", "median_ns", "iqr_ns", "min_ns", "max_ns"]
    out[int_cols] = out[int_cols].astype("int64")
    return out[SUMMARY_COLUMNS].sort_values(["strategy", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Strategy Summary (comparisons / swaps, median ms)")
    table.add_column("Strategy", style="bold")
    picks: List[Tuple[str, int]] = []
    for npick in dict.fromkeys([sizes[0], sizes[len(sizes) // 2], sizes[-1]]):
        picks.append((f"n={npick}", npick))
        table.add_column(f"n={npick}", justify="right")

    for strategy in summary["strategy"].unique():
        row = [f"[bold]{strategy}[/]"]
        for _, npick in picks:
            s = summary[(summary["strategy"] == strategy) & (summary["n"] == npick)]
            if s.empty:
                row.append("—")
                continue
            rec = s.iloc[0]
            row.append(
                f"{int(rec['comparisons'])} / {int(rec['swaps'])}  "
                f"{rec['median_ns'] / 1e6:.2f}"
            )
        table.add_row(*row)
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes = _resolve_sizes(list(cfg["sizes"]))
    repeats = int(cfg["repeats"])
    warmup = bool(cfg["warmup"])
    disable_gc = bool(cfg["disable_gc"])
    timeout_seconds = float(cfg["timeout_seconds"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    strategies = _resolve_strategies(list(cfg["strategies"]))
    validate = bool(cfg.get("validate", True))
    dump_traces = bool(cfg.get("dump_traces", False))

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"
    traces_dir = run_dir / "traces"
    if dump_traces:
        traces_dir.mkdir()

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    skip = {s: False for s in strategies}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Strategies:[/bold] {', '.join(s.value for s in strategies)}")
    _console.print()
    logger.info("experiment %s: sizes=%s strategies=%s", experiment_name, sizes,
                [s.value for s in strategies])

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        base_a = make_dataset(n, dataset_spec, rng)

        for strategy in strategies:
            if skip[strategy]:
                continue

            res = trace_sort_call(
                strategy=strategy,
                a=base_a,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
            )
            steps = res["steps"]

            problems: List[str] = []
            if validate and steps is not None:
                problems = check_run(base_a, steps)

            for trial_idx, t_ns in enumerate(res["samples_ns"]):
                _append_jsonl(
                    {
                        "strategy": strategy.value,
                        "n": n,
                        "dataset": dataset_spec,
                        "trial": trial_idx,
                        "time_ns": int(t_ns),
                        "steps": res["step_count"],
                        "comparisons": res["comparisons"],
                        "swaps": res["swaps"],
                        "valid": not problems,
                    },
                    results_path,
                )

            if dump_traces and steps is not None:
                _write_jsonl((s.to_dict() for s in steps), traces_dir / f"{strategy.value}_n{n}.jsonl")

            status = res["status"]
            if status == "timeout":
                skip[strategy] = True
                _append_jsonl(
                    {
                        "strategy": strategy.value,
                        "n": n,
                        "status": "timeout",
                        "timed_out_on_repeat": res["timed_out_on_repeat"],
                    },
                    results_path,
                )
            elif status == "error":
                skip[strategy] = True
                _append_jsonl(
                    {"strategy": strategy.value, "n": n, "status": "error", "error": res["error"]},
                    results_path,
                )
            elif problems:
                skip[strategy] = True
                logger.error("%s produced an invalid run at n=%d: %s", strategy.value, n, problems)
                _append_jsonl(
                    {"strategy": strategy.value, "n": n, "status": "invalid", "problems": problems},
                    results_path,
                )

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)

    _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    _console.print(f" - {results_path}")
    _console.print(f" - {summary_path}")
    _console.print(f" - {meta_path}")
    _console.print(f" - {cfg_resolved_path}")
    if dump_traces:
        _console.print(f" - {traces_dir}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compare sorting strategies from a YAML experiment config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    setup_logging(args.log_level)
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
