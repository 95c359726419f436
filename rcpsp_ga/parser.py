"""Problem file loading (YAML or JSON).

Expected structure::

    elements:
      - name: alice
        skills: {design: 1.0, coding: 0.5}
    tasks:
      - name: spec
        duration: 10
        skill: design
        precedences: []        # names of tasks that must finish first

Task and element order in the file defines their ids.
"""

import json
import os
from typing import Any

import yaml

from rcpsp_ga.models import Element, Problem, Task


def read_mapping_file(path: str) -> dict[str, Any]:
    """Read a YAML (``.yml``/``.yaml``) or JSON file into a dict."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith((".yml", ".yaml")):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at top level of {path}")
    return data


def parse_problem(data: dict[str, Any]) -> Problem:
    """Build a Problem from an already-loaded mapping.

    Raises:
        ValueError: On missing sections, duplicate names, non-positive
            durations, non-numeric performances or unknown precedences.
    """
    raw_elements = data.get("elements")
    raw_tasks = data.get("tasks")
    if not isinstance(raw_elements, list) or not isinstance(raw_tasks, list):
        raise ValueError("Problem needs 'elements' and 'tasks' lists")

    elements: list[Element] = []
    for i, raw in enumerate(raw_elements):
        if not isinstance(raw, dict):
            raise ValueError(f"Element #{i}: expected a mapping")
        name = str(raw.get("name", f"E{i}"))
        skills = raw.get("skills") or {}
        if not isinstance(skills, dict):
            raise ValueError(f"Element {name!r}: 'skills' must be a mapping")
        try:
            performances = {str(k): float(v) for k, v in skills.items()}
        except (TypeError, ValueError) as e:
            raise ValueError(f"Element {name!r}: non-numeric performance") from e
        elements.append(Element(name=name, performances=performances))

    for i, raw in enumerate(raw_tasks):
        if not isinstance(raw, dict):
            raise ValueError(f"Task #{i}: expected a mapping")
    names = [str(raw.get("name", f"T{i}")) for i, raw in enumerate(raw_tasks)]
    if len(set(names)) != len(names):
        raise ValueError("Duplicate task names")
    index = {name: i for i, name in enumerate(names)}

    tasks: list[Task] = []
    for name, raw in zip(names, raw_tasks):
        if "skill" not in raw:
            raise ValueError(f"Task {name!r}: missing 'skill'")
        try:
            duration = float(raw.get("duration", 0))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Task {name!r}: non-numeric duration") from e
        if duration <= 0:
            raise ValueError(f"Task {name!r}: duration must be positive")
        precedences = []
        for p in raw.get("precedences") or []:
            if str(p) not in index:
                raise ValueError(f"Task {name!r}: unknown precedence {p!r}")
            precedences.append(index[str(p)])
        tasks.append(
            Task(name=name, duration=duration, skill=str(raw["skill"]), precedences=tuple(precedences))
        )

    return Problem(tasks=tuple(tasks), elements=tuple(elements))


def load_problem(path: str) -> Problem:
    return parse_problem(read_mapping_file(path))
