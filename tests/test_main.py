"""Tests for the config-driven entry point and chart output.

Creates a temporary charts output directory under pytest tmp_path.
"""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from rcpsp_ga.chromosome import Chromosome
from rcpsp_ga.genetic import GAParams
from rcpsp_ga.main import cli, main, params_from_config
from rcpsp_ga.parser import load_problem
from rcpsp_ga.visualization import save_gantt_chart, save_progress_plot

FIXTURE = str(Path(__file__).parent / "fixtures" / "small_project.yaml")


def test_params_from_config_defaults_and_overrides():
    params = params_from_config({"ga": {"generations": 7}, "evaluation": {"scan_order": "decoded"}})
    assert params.generations == 7
    assert params.population_size == GAParams().population_size
    assert params.scan_order == "decoded"
    assert params_from_config({}) == GAParams()


def test_main_writes_results_and_charts(tmp_path: Path):
    charts = tmp_path / "charts"
    params = GAParams(population_size=6, generations=3)
    results = main(FIXTURE, params, runs=2, seed=1, charts_dir=str(charts))

    json_files = list(charts.glob("ga_results_*.json"))
    assert json_files, "Expected ga_results JSON file"
    data = json.loads(json_files[0].read_text())
    for key in ["problem", "runs", "seed", "timestamp", "per_run", "best"]:
        assert key in data
    assert data["runs"] == 2
    assert len(data["per_run"]) == 2
    best = data["best"]
    assert best["makespan"] == min(r["makespan"] for r in data["per_run"])
    assert sorted(best["task_order"]) == list(range(5))
    assert len(best["schedule"]) == 5
    assert max(row["end"] for row in best["schedule"]) == best["makespan"]
    assert results["best"]["makespan"] == best["makespan"]
    assert list(charts.glob("gantt_*.png"))
    assert list(charts.glob("progress_*.png"))


def test_main_determinism_seed():
    params = GAParams(population_size=6, generations=3)
    a = main(FIXTURE, params, runs=1, seed=9, charts_dir=None)
    b = main(FIXTURE, params, runs=1, seed=9, charts_dir=None)
    assert a["best"]["makespan"] == b["best"]["makespan"]
    assert a["best"]["task_order"] == b["best"]["task_order"]


def test_cli_reads_yaml_config(tmp_path: Path):
    charts = tmp_path / "out"
    config = tmp_path / "config.yaml"
    config.write_text(
        f"problem: {FIXTURE}\n"
        "seed: 3\n"
        "log_level: WARNING\n"
        "ga:\n  population_size: 4\n  generations: 2\n"
        f"charts:\n  dir: {charts}\n",
        encoding="utf-8",
    )
    cli(["--config", str(config)])
    assert list(charts.glob("ga_results_*.json"))


@pytest.mark.parametrize("runs", [0, -2])
def test_cli_rejects_non_positive_runs(tmp_path: Path, runs: int):
    config = tmp_path / "config.yaml"
    config.write_text(
        f"problem: {FIXTURE}\nruns: {runs}\ncharts:\n  dir: {tmp_path / 'out'}\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="runs"):
        cli(["--config", str(config)])
    assert not (tmp_path / "out").exists()


def test_save_gantt_chart(tmp_path: Path):
    problem = load_problem(FIXTURE)
    schedule = Chromosome(problem, rng=random.Random(0)).schedule()
    out = save_gantt_chart(problem, schedule, str(tmp_path / "sub" / "gantt.png"))
    assert Path(out).exists()
    out = save_progress_plot([30, 28, 28, 25], str(tmp_path / "progress.png"))
    assert Path(out).exists()
