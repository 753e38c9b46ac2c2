import pytest

from smart_scheduler.core.errors import CycleError
from smart_scheduler.core.sequence.sequence_tasks import sequence_tasks
from smart_scheduler.core.validate.build_registry import build_registry


def _task(title, hours=4, due="2024-01-12", deps=()):
    return {"title": title, "estimatedHours": hours, "dueDate": due, "dependencies": list(deps)}


def test_earlier_due_date_first():
    registry = build_registry([_task("Late", due="2024-02-01"), _task("Soon", due="2024-01-09")])
    assert sequence_tasks(registry) == ["Soon", "Late"]


def test_tie_on_due_date_prefers_larger_effort_then_title():
    registry = build_registry(
        [_task("b-small", hours=2), _task("c-big", hours=9), _task("a-small", hours=2)]
    )
    assert sequence_tasks(registry) == ["c-big", "a-small", "b-small"]


def test_dependencies_precede_dependents():
    tasks = [
        _task("Release", due="2024-01-09", deps=["Build", "Docs"]),
        _task("Build", due="2024-01-20", deps=["Design"]),
        _task("Docs", due="2024-01-15", deps=["Design"]),
        _task("Design", due="2024-01-30"),
    ]
    order = sequence_tasks(build_registry(tasks))
    assert sorted(order) == sorted(t["title"] for t in tasks)
    pos = {t: i for i, t in enumerate(order)}
    for t in tasks:
        for dep in t["dependencies"]:
            assert pos[dep] < pos[t["title"]]
    assert order == ["Design", "Docs", "Build", "Release"]


def test_newly_ready_task_interleaves_with_waiting_ones():
    # Unblocked "Urgent" must jump ahead of the already-ready "Whenever".
    tasks = [
        _task("Whenever", due="2024-03-01"),
        _task("Setup", due="2024-01-20"),
        _task("Urgent", due="2024-01-10", deps=["Setup"]),
    ]
    assert sequence_tasks(build_registry(tasks)) == ["Setup", "Urgent", "Whenever"]


def test_two_task_cycle():
    registry = build_registry([_task("A", deps=["B"]), _task("B", deps=["A"])])
    with pytest.raises(CycleError) as exc:
        sequence_tasks(registry)
    assert exc.value.code == "E_CYCLE_DETECTED"
    assert exc.value.message == "dependency cycle detected: A -> B -> A"


def test_cycle_behind_a_valid_prefix():
    registry = build_registry(
        [
            _task("Root"),
            _task("X", deps=["Root", "Z"]),
            _task("Y", deps=["X"]),
            _task("Z", deps=["Y"]),
            _task("Tail", deps=["Z"]),
        ]
    )
    with pytest.raises(CycleError) as exc:
        sequence_tasks(registry)
    for title in ("X", "Y", "Z"):
        assert title in exc.value.message
    assert "Root" not in exc.value.message
    assert "Tail" not in exc.value.message


def test_long_cycle_is_reported_not_crashed():
    n = 1500
    tasks = [_task(f"t{i}", deps=[f"t{(i + 1) % n}"]) for i in range(n)]
    registry = build_registry(tasks)
    with pytest.raises(CycleError) as exc:
        sequence_tasks(registry)
    assert exc.value.message.startswith("dependency cycle detected: t0 -> t1499 -> t1498")
    assert exc.value.message.endswith("t1 -> t0")
    assert exc.value.message.count(" -> ") == n
