# tests/test_task_models.py

from __future__ import annotations

import pytest

from asset_minimizer.tasks.task_models import ResultSlot, TaskState, can_transition


def test_slot_lifecycle_pending_running_succeeded() -> None:
    slot: ResultSlot[int] = ResultSlot(index=3)
    assert slot.state == TaskState.PENDING
    assert not slot.filled

    slot.advance(TaskState.RUNNING)
    slot.fill(0)

    assert slot.state == TaskState.SUCCEEDED
    assert slot.filled
    assert slot.value == 0


def test_slot_fills_exactly_once() -> None:
    slot: ResultSlot[str] = ResultSlot(index=0)
    slot.advance(TaskState.RUNNING)
    slot.fill("x")

    with pytest.raises(RuntimeError, match="already filled"):
        slot.fill("y")


def test_slot_cannot_fill_before_running() -> None:
    slot: ResultSlot[str] = ResultSlot(index=0)
    with pytest.raises(RuntimeError, match="Illegal task transition"):
        slot.fill("x")


@pytest.mark.parametrize(
    ("current", "new", "ok"),
    [
        (TaskState.PENDING, TaskState.RUNNING, True),
        (TaskState.RUNNING, TaskState.FAILED, True),
        (TaskState.PENDING, TaskState.SUCCEEDED, False),
        (TaskState.FAILED, TaskState.RUNNING, False),
        (TaskState.SUCCEEDED, TaskState.FAILED, False),
    ],
)
def test_transitions(current: TaskState, new: TaskState, ok: bool) -> None:
    assert can_transition(current, new) is ok
