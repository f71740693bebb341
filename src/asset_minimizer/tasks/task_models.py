# src/asset_minimizer/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class TaskState(StrEnum):
    """Lifecycle of one scheduled task."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ScheduleState(StrEnum):
    """Lifecycle of one throttle_all call."""

    COLLECTING = "collecting"
    ALL_SUCCEEDED = "all_succeeded"
    FIRST_FAILURE_PROPAGATED = "first_failure_propagated"


_TASK_TRANSITIONS: dict[TaskState, frozenset[TaskState]] = {
    TaskState.PENDING: frozenset({TaskState.RUNNING}),
    TaskState.RUNNING: frozenset({TaskState.SUCCEEDED, TaskState.FAILED}),
    TaskState.SUCCEEDED: frozenset(),
    TaskState.FAILED: frozenset(),
}


def can_transition(current: TaskState, new: TaskState) -> bool:
    return new in _TASK_TRANSITIONS[current]


@dataclass(slots=True)
class ResultSlot(Generic[T]):
    """
    Output cell for one task index.

    `filled` is tracked explicitly, so any value (None included) is a legitimate result.
    """

    index: int
    state: TaskState = TaskState.PENDING
    filled: bool = False
    value: T | None = None

    def advance(self, new_state: TaskState) -> None:
        if not can_transition(self.state, new_state):
            raise RuntimeError(f"Illegal task transition {self.state} -> {new_state} (index={self.index})")
        self.state = new_state

    def fill(self, value: T) -> None:
        if self.filled:
            raise RuntimeError(f"Result slot {self.index} is already filled")
        self.advance(TaskState.SUCCEEDED)
        self.value = value
        self.filled = True
