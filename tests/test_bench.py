"""
Tests for the timing harness and the YAML experiment runner.
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest
import yaml

from sorttrace.bench.measure import trace_sort_call
from sorttrace.bench.runner import main, run_experiment


def _write_config(tmp_path: Path, **overrides) -> Path:
    cfg = {
        "experiment_name": "unit",
        "output_dir": str(tmp_path / "results"),
        "seed": 11,
        "repeats": 2,
        "warmup": False,
        "disable_gc": True,
        "timeout_seconds": 30.0,
        "dataset": {"dist": "random", "params": {"range": [10, 100]}},
        "sizes": [0, 5, 12],
        "strategies": ["hybrid", "quicksort", "insertion"],
    }
    cfg.update(overrides)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


# ------------------------- measure ------------------------- #

def test_trace_sort_call_reports_totals() -> None:
    res = trace_sort_call(
        strategy="insertion", a=[5, 3, 8, 1], repeats=3,
        warmup=True, disable_gc=False, timeout_seconds=10.0,
    )
    assert res["status"] == "ok"
    assert res["strategy"] == "insertion"
    assert len(res["samples_ns"]) == 3
    assert (res["comparisons"], res["swaps"], res["step_count"]) == (5, 4, 12)
    assert res["steps"][-1].array == (1, 3, 5, 8)


def test_trace_sort_call_error_status() -> None:
    res = trace_sort_call(
        strategy="hybrid", a=[1, "x"], repeats=2,
        warmup=False, disable_gc=False, timeout_seconds=10.0,
    )
    assert res["status"] == "error"
    assert "TypeError" in res["error"]
    assert res["samples_ns"] == []


def test_trace_sort_call_timeout_stops_sampling() -> None:
    res = trace_sort_call(
        strategy="quicksort", a=list(range(60)), repeats=5,
        warmup=False, disable_gc=False, timeout_seconds=1e-9,
    )
    assert res["status"] == "timeout"
    assert res["timed_out_on_repeat"] == 0
    assert len(res["samples_ns"]) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"strategy": "bogus", "repeats": 1, "timeout_seconds": 1.0},
        {"strategy": "hybrid", "repeats": -1, "timeout_seconds": 1.0},
        {"strategy": "hybrid", "repeats": 1, "timeout_seconds": 0},
    ],
)
def test_trace_sort_call_rejects_bad_arguments(kwargs) -> None:
    with pytest.raises(ValueError):
        trace_sort_call(a=[1], warmup=False, disable_gc=False, **kwargs)


# ------------------------- runner ------------------------- #

def test_run_experiment_writes_outputs(tmp_path: Path) -> None:
    run_dir = run_experiment(_write_config(tmp_path, dump_traces=True))

    for name in ("results.jsonl", "summary.csv", "meta.json", "config_resolved.yaml"):
        assert (run_dir / name).exists(), name

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert "numpy" in meta and "machine" in meta

    lines = [json.loads(x) for x in (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()]
    assert len(lines) == 3 * 3 * 2
    assert all(line["valid"] for line in lines)

    summary = pd.read_csv(run_dir / "summary.csv")
    assert len(summary) == 9
    assert set(summary["strategy"]) == {"hybrid", "quicksort", "insertion"}
    empty = summary[summary["n"] == 0]
    assert (empty["steps"] == 2).all()
    assert (empty["comparisons"] == 0).all()
    # size 5 is below the threshold: hybrid does exactly what insertion does, plus one step
    n5 = summary[summary["n"] == 5].set_index("strategy")
    assert n5.loc["hybrid", "comparisons"] == n5.loc["insertion", "comparisons"]
    assert n5.loc["hybrid", "steps"] == n5.loc["insertion", "steps"] + 1

    trace = (run_dir / "traces" / "quicksort_n12.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(trace[-1])["activeAlgorithm"] == "complete"


def test_run_experiment_skips_after_timeout(tmp_path: Path) -> None:
    run_dir = run_experiment(_write_config(
        tmp_path, timeout_seconds=1e-9, repeats=1, strategies=["quicksort"], sizes=[5, 8],
    ))
    lines = [json.loads(x) for x in (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [line.get("status") for line in lines] == [None, "timeout"]
    assert {line["n"] for line in lines} == {5}


@pytest.mark.parametrize(
    "overrides",
    [
        {"strategies": ["hybrid", "merge"]},
        {"strategies": ["hybrid", "hybrid"]},
        {"sizes": []},
        {"sizes": [-3]},
    ],
)
def test_run_experiment_rejects_bad_config(tmp_path: Path, overrides) -> None:
    with pytest.raises(ValueError):
        run_experiment(_write_config(tmp_path, **overrides))


def test_run_experiment_missing_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"experiment_name": "x"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Missing required config keys"):
        run_experiment(path)


def test_cli_missing_config(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main([str(tmp_path / "nope.yaml")])
