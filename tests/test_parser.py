"""Pytest tests for problem loading.

Each error test writes a small problem file under ``tmp_path`` and asserts
the ``ValueError`` raised by the parser.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rcpsp_ga.parser import load_problem, parse_problem

FIXTURE = str(Path(__file__).parent / "fixtures" / "small_project.yaml")


def test_load_yaml_fixture():
    problem = load_problem(FIXTURE)
    assert problem.num_tasks == 5
    assert problem.num_elements == 3
    assert [t.name for t in problem.tasks] == ["spec", "backend", "frontend", "qa", "docs"]
    assert problem.tasks[3].precedences == (1, 2)
    assert problem.tasks[0].precedences == ()
    alice = problem.elements[0]
    assert alice.skill_performance("coding") == 0.5
    assert alice.skill_performance("testing") == 0.0
    assert problem.qualified_elements("coding") == [0, 1, 2]
    assert problem.qualified_elements("testing") == [2]


def test_loaded_problem_is_hashable():
    problem = load_problem(FIXTURE)
    assert hash(problem) == hash(problem)
    assert len({element for element in problem.elements}) == problem.num_elements
    assert {problem: "cached"}[problem] == "cached"


def test_load_json(tmp_path: Path):
    data = {
        "elements": [{"name": "w", "skills": {"s": 1}}],
        "tasks": [
            {"name": "a", "duration": 3, "skill": "s"},
            {"name": "b", "duration": 2, "skill": "s", "precedences": ["a"]},
        ],
    }
    path = tmp_path / "problem.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    problem = load_problem(str(path))
    assert problem.tasks[1].precedences == (0,)
    assert problem.elements[0].skill_performance("s") == 1.0


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_problem(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize(
    "content",
    [
        "- just a list\n",
        "elements: []\n",  # no tasks section
        "elements: []\ntasks:\n  - {name: a, duration: 0, skill: s}\n",
        "elements: []\ntasks:\n  - {name: a, duration: 2}\n",
        "elements: []\ntasks:\n  - {name: a, duration: 2, skill: s, precedences: [zz]}\n",
        "elements: []\ntasks:\n  - {name: a, duration: 2, skill: s}\n  - {name: a, duration: 1, skill: s}\n",
        "elements:\n  - {name: w, skills: {s: fast}}\ntasks: []\n",
        "elements: []\ntasks:\n  - {name: a, duration: 2, skill: s, precedences: [a]}\n",
        "elements: [alice]\ntasks: []\n",  # element entry is not a mapping
        "elements: []\ntasks: [spec]\n",  # task entry is not a mapping
    ],
)
def test_parse_errors(tmp_path: Path, content: str):
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_problem(str(path))


@pytest.mark.parametrize(
    "data",
    [
        {"elements": ["alice"], "tasks": []},
        {"elements": [], "tasks": ["spec"]},
        {"elements": [{"name": "w", "skills": {"s": 1}}], "tasks": [{"name": "a", "duration": 1, "skill": "s"}, 3]},
    ],
)
def test_parse_problem_rejects_non_mapping_entries(data: dict):
    with pytest.raises(ValueError, match="expected a mapping"):
        parse_problem(data)


def test_parse_problem_defaults_names():
    problem = parse_problem({"elements": [{"skills": {"s": 2}}], "tasks": [{"duration": 1, "skill": "s"}]})
    assert problem.elements[0].name == "E0"
    assert problem.tasks[0].name == "T0"
