import logging
import os
from typing import Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from rcpsp_ga.models import Problem, Schedule  # noqa: E402

logger = logging.getLogger("rcpsp.visualization")


def _ensure_dir(path: str) -> None:
    if path:
        os.makedirs(path, exist_ok=True)


def save_gantt_chart(
    problem: Problem,
    schedule: Schedule,
    filepath: str,
    show_legend: Optional[bool] = None,
) -> str:
    """Create and save a Gantt chart with one row per element.

    A task worked on by several elements is drawn once on each of their rows.
    The legend is disabled automatically for many tasks unless forced.

    Returns:
        Path of the written image.
    """
    m = problem.num_elements
    n = problem.num_tasks
    base_w, base_h = 10, 0.5 * m + 2
    fig, ax = plt.subplots(
        figsize=(min(base_w + n * 0.05, 18), min(base_h, 16)),
        constrained_layout=True,
    )
    cmap = matplotlib.colormaps["tab20"]
    colors = [cmap(i % 20) for i in range(n)]
    for row in schedule.tasks:
        for e in row.elements:
            ax.barh(
                e,
                row.duration,
                left=row.start,
                height=0.8,
                color=colors[row.task],
                alpha=0.85,
                edgecolor="black",
                linewidth=0.6,
            )
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Element", fontsize=12)
    ax.set_title(f"Gantt Chart - Makespan = {schedule.makespan}", fontsize=14, fontweight="bold")
    ax.set_yticks(range(m))
    ax.set_yticklabels([el.name for el in problem.elements])
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.set_ylim(-0.5, m - 0.5)

    if show_legend is None:
        show_legend = n <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=colors[i], alpha=0.85, edgecolor="black", label=task.name
            )
            for i, task in enumerate(problem.tasks)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if n <= 25 else 2,
        )

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    logger.info("Saved Gantt chart to %s", filepath)
    return filepath


def save_progress_plot(progress: list[int], filepath: str) -> str:
    """Plot best makespan per generation and save it."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    ax.plot(range(len(progress)), progress, linewidth=1.5, color="tab:blue")
    ax.set_xlabel("Generation")
    ax.set_ylabel("Best makespan")
    ax.set_title("GA convergence")
    ax.grid(True, alpha=0.3, linestyle="--")
    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    logger.info("Saved progress plot to %s", filepath)
    return filepath
