import argparse
import json
import logging
import os
import random
from datetime import datetime
from typing import Any, Dict, Optional

from rcpsp_ga.genetic import GAParams, run_genetic_algorithm
from rcpsp_ga.parser import load_problem, read_mapping_file
from rcpsp_ga.visualization import save_gantt_chart, save_progress_plot

logger = logging.getLogger("rcpsp")


def params_from_config(cfg: Dict[str, Any]) -> GAParams:
    ga_cfg = cfg.get("ga", {}) if isinstance(cfg.get("ga"), dict) else {}
    eval_cfg = cfg.get("evaluation", {}) if isinstance(cfg.get("evaluation"), dict) else {}
    return GAParams(
        population_size=int(ga_cfg.get("population_size", 30)),
        generations=int(ga_cfg.get("generations", 50)),
        crossover_rate=float(ga_cfg.get("crossover_rate", 0.9)),
        mutation_rate=float(ga_cfg.get("mutation_rate", 0.01)),
        tournament_size=int(ga_cfg.get("tournament_size", 3)),
        elite_size=int(ga_cfg.get("elite_size", 1)),
        scan_order=str(eval_cfg.get("scan_order", "index")),
    )


def main(
    problem_path: str,
    params: GAParams,
    runs: int = 1,
    seed: Optional[int] = None,
    charts_dir: Optional[str] = "charts",
) -> Dict[str, Any]:
    """Run the GA ``runs`` times and write results JSON plus charts.

    Returns:
        The results dictionary that was written to disk.
    """
    problem = load_problem(problem_path)
    logger.info(
        "Problem: %s tasks=%d elements=%d",
        problem_path,
        problem.num_tasks,
        problem.num_elements,
    )
    rng = random.Random(seed) if seed is not None else random.Random()
    best = None
    best_progress: list[int] = []
    per_run = []
    for r_idx in range(runs):
        progress: list[int] = []
        chromosome, elapsed = run_genetic_algorithm(problem, params, rng=rng, progress=progress)
        per_run.append({"run": r_idx, "makespan": chromosome.fitness, "time_s": round(elapsed, 4)})
        logger.info("[run %d] makespan=%d time=%.3fs", r_idx, chromosome.fitness, elapsed)
        if best is None or chromosome.fitness < best.fitness:
            best = chromosome
            best_progress = progress

    schedule = best.schedule()
    results = {
        "problem": problem_path,
        "runs": runs,
        "seed": seed,
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "per_run": per_run,
        "best": {
            "makespan": best.fitness,
            "task_order": best.decode().task_order,
            "schedule": [
                {
                    "task": problem.tasks[row.task].name,
                    "start": row.start,
                    "end": row.end,
                    "elements": [problem.elements[e].name for e in row.elements],
                }
                for row in schedule.tasks
            ],
        },
    }
    if charts_dir:
        os.makedirs(charts_dir, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_path = os.path.join(charts_dir, f"ga_results_{ts}.json")
        with open(results_path, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)
        logger.info("Saved results JSON to %s", results_path)
        save_gantt_chart(problem, schedule, os.path.join(charts_dir, f"gantt_{ts}.png"))
        save_progress_plot(best_progress, os.path.join(charts_dir, f"progress_{ts}.png"))
    return results


def cli(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="RCPSP genetic algorithm (config only)")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to a YAML/JSON configuration file",
    )
    args = parser.parse_args(argv)
    cfg = read_mapping_file(args.config)

    log_level = cfg.get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    problem_path = cfg.get("problem")
    if not problem_path:
        raise ValueError("Missing 'problem' key in config")
    runs = int(cfg.get("runs", 1))
    if runs < 1:
        raise ValueError(f"'runs' must be at least 1, got {runs}")
    charts_cfg = cfg.get("charts", {}) if isinstance(cfg.get("charts"), dict) else {}
    seed = cfg.get("seed")

    main(
        problem_path=problem_path,
        params=params_from_config(cfg),
        runs=runs,
        seed=int(seed) if seed is not None else None,
        charts_dir=charts_cfg.get("dir", "charts"),
    )


if __name__ == "__main__":
    cli()
