from datetime import date

import pytest

from smart_scheduler.core.errors import DependencyError, InputShapeError, TaskValidationError
from smart_scheduler.core.validate.build_registry import build_registry, validate_tasks


def _task(title, hours=4, due="2024-01-12", deps=None):
    raw = {"title": title, "estimatedHours": hours, "dueDate": due}
    if deps is not None:
        raw["dependencies"] = deps
    return raw


def test_registry_happy_path():
    registry = build_registry([_task("A"), _task("B", deps=["A"]), _task("C", deps=["A", "B"])])
    assert list(registry.tasks_by_title) == ["A", "B", "C"]
    a = registry.tasks_by_title["A"]
    assert a.estimated_hours == 4
    assert a.due_date == date(2024, 1, 12)
    assert a.dependencies == ()
    assert registry.dependents == {"A": ["B", "C"], "B": ["C"], "C": []}
    assert registry.indegree == {"A": 0, "B": 1, "C": 2}


def test_duplicate_dependencies_collapse():
    registry = build_registry([_task("A"), _task("B", deps=["A", "A"])])
    assert registry.tasks_by_title["B"].dependencies == ("A",)
    assert registry.indegree["B"] == 1


@pytest.mark.parametrize("tasks", [None, [], {}, "A"])
def test_missing_or_empty_tasks(tasks):
    with pytest.raises(InputShapeError) as exc:
        build_registry(tasks)
    assert exc.value.code == "E_NO_TASKS"


@pytest.mark.parametrize(
    "raw, code, path",
    [
        ("not-a-task", "E_INVALID_TYPE", "tasks[0]"),
        ({"estimatedHours": 2, "dueDate": "2024-01-12"}, "E_REQUIRED_FIELD", "tasks[0].title"),
        (_task("   "), "E_REQUIRED_FIELD", "tasks[0].title"),
        (_task("A", hours=0), "E_INVALID_HOURS", "tasks[0].estimatedHours"),
        (_task("A", hours=-3), "E_INVALID_HOURS", "tasks[0].estimatedHours"),
        (_task("A", hours="5"), "E_INVALID_HOURS", "tasks[0].estimatedHours"),
        (_task("A", hours=True), "E_INVALID_HOURS", "tasks[0].estimatedHours"),
        (_task("A", hours=float("nan")), "E_INVALID_HOURS", "tasks[0].estimatedHours"),
        (_task("A", due="2024-13-01"), "E_INVALID_DATE", "tasks[0].dueDate"),
        (_task("A", due="01/12/2024"), "E_INVALID_DATE", "tasks[0].dueDate"),
        (_task("A", deps="B"), "E_INVALID_TYPE", "tasks[0].dependencies"),
        (_task("A", deps=[1]), "E_INVALID_TYPE", "tasks[0].dependencies"),
    ],
)
def test_task_field_errors(raw, code, path):
    with pytest.raises(TaskValidationError) as exc:
        build_registry([raw])
    assert exc.value.code == code
    assert exc.value.path == path


def test_duplicate_title():
    with pytest.raises(TaskValidationError) as exc:
        build_registry([_task("A"), _task("A", hours=2)])
    assert exc.value.code == "E_DUPLICATE_TITLE"
    assert exc.value.path == "tasks[1].title"


def test_unknown_dependency():
    with pytest.raises(DependencyError) as exc:
        build_registry([_task("A", deps=["Ghost"])])
    assert exc.value.code == "E_UNKNOWN_DEPENDENCY"
    assert "Ghost" in exc.value.message


def test_self_dependency():
    with pytest.raises(DependencyError) as exc:
        build_registry([_task("A", deps=["A"])])
    assert exc.value.code == "E_SELF_DEPENDENCY"
    assert exc.value.path == "tasks[0].dependencies[0]"


def test_validate_collects_all_errors_in_order():
    registry, errors = validate_tasks(
        [_task(""), _task("B", hours=0), _task("C", deps=["Nope"]), _task("D", due="bad")],
        file="req.yaml",
    )
    assert registry is None
    assert [e.code for e in errors] == [
        "E_REQUIRED_FIELD",
        "E_INVALID_HOURS",
        "E_INVALID_DATE",
        "E_UNKNOWN_DEPENDENCY",
    ]
    assert all(e.file == "req.yaml" for e in errors)
    assert str(errors[0]) == "req.yaml:tasks[0].title: E_REQUIRED_FIELD: title is required and must be a non-empty string"
