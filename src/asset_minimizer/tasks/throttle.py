# src/asset_minimizer/tasks/throttle.py

from __future__ import annotations

"""
Bounded task scheduler.

Runs an ordered list of zero-argument async callables with at most `limit` of them
in flight at once:
- a fixed pool of min(limit, len(tasks)) workers pulls indices from a shared cursor,
- results land in per-index slots, so the returned list follows input order,
- the first failure (by settlement time, not by index) becomes the outcome immediately.

Tasks still in flight when a failure is observed are NOT cancelled by default. They run
to completion and whatever they produce (value or exception) is discarded without being
logged or re-raised. Pass cancel_on_error=True to cancel them instead.

If several tasks fail with comparable latency, which failure is propagated can differ
between runs. Callers must not rely on it.
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import Any, TypeVar

from ..core.errors import InvalidArgumentError
from ..core.ports import Task
from .task_models import ResultSlot, ScheduleState, TaskState

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Strong refs to running workers: the event loop only keeps weak ones, and workers
# may outlive the throttle_all call that spawned them (after an early failure).
_RUNNING_WORKERS: set[asyncio.Task[None]] = set()


def _validate_limit(limit: Any) -> None:
    # bool is an int subclass; True is not a meaningful limit.
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError(
            f"Expected `limit` to be an integer >= 1, got {limit!r} ({type(limit).__name__})"
        )


def _validate_tasks(tasks: Any) -> None:
    if (
        not isinstance(tasks, Sequence)
        or isinstance(tasks, (str, bytes, bytearray))
        or not all(callable(task) for task in tasks)
    ):
        raise InvalidArgumentError(
            "Expected `tasks` to be a sequence of zero-argument callables returning an awaitable"
        )


def throttle_all(
        limit: int,
        tasks: Sequence[Task[T]],
        *,
        cancel_on_error: bool = False,
) -> Awaitable[list[T]]:
    """
    Run tasks with limited concurrency.

    Arguments are validated here, synchronously: a bad `limit` or `tasks` raises
    InvalidArgumentError at call time and no task is ever invoked. The returned
    awaitable resolves to the results in input order, or raises the first task failure
    verbatim.
    """
    _validate_limit(limit)
    _validate_tasks(tasks)
    return _run_throttled(limit, tuple(tasks), cancel_on_error=cancel_on_error)


async def _run_throttled(
        limit: int,
        tasks: tuple[Task[T], ...],
        *,
        cancel_on_error: bool,
) -> list[T]:
    total = len(tasks)
    if total == 0:
        return []

    loop = asyncio.get_running_loop()
    outcome: asyncio.Future[None] = loop.create_future()
    slots: list[ResultSlot[T]] = [ResultSlot(index=i) for i in range(total)]
    cursor = iter(range(total))
    remaining = total

    async def worker() -> None:
        nonlocal remaining

        while not outcome.done():
            # Claiming has no await: no other worker can interleave here.
            index = next(cursor, None)
            if index is None:
                return

            slot = slots[index]
            slot.advance(TaskState.RUNNING)
            try:
                value = await tasks[index]()
            except (Exception, asyncio.CancelledError) as exc:
                # A task may end in CancelledError of its own (e.g. awaiting a cancelled
                # future). Only a cancel aimed at this worker is re-raised.
                current = asyncio.current_task()
                if isinstance(exc, asyncio.CancelledError) and current is not None and current.cancelling():
                    raise
                slot.advance(TaskState.FAILED)
                if not outcome.done():
                    outcome.set_exception(exc)
                return

            if outcome.done():
                # Settled by another worker's failure; this result is dropped.
                slot.advance(TaskState.SUCCEEDED)
                return

            slot.fill(value)
            remaining -= 1
            if remaining == 0:
                outcome.set_result(None)

    pool_size = min(limit, total)
    logger.debug(
        "throttle_all: %s %d tasks with %d workers", ScheduleState.COLLECTING.value, total, pool_size
    )

    def settle_from_worker(w: asyncio.Task[None]) -> None:
        # A worker that dies while the outcome is pending must not leave the caller waiting.
        exc = asyncio.CancelledError(f"{w.get_name()} was cancelled") if w.cancelled() else w.exception()
        if exc is not None and not outcome.done():
            outcome.set_exception(exc)

    workers: list[asyncio.Task[None]] = []
    for n in range(pool_size):
        w = loop.create_task(worker(), name=f"throttle-worker-{n}")
        _RUNNING_WORKERS.add(w)
        w.add_done_callback(_RUNNING_WORKERS.discard)
        w.add_done_callback(settle_from_worker)
        workers.append(w)

    try:
        await outcome
    except (Exception, asyncio.CancelledError):
        if outcome.cancelled() or not outcome.done():
            # The caller was cancelled, not a task.
            for w in workers:
                w.cancel()
            raise
        logger.debug("throttle_all: %s", ScheduleState.FIRST_FAILURE_PROPAGATED.value)
        if cancel_on_error:
            for w in workers:
                w.cancel()
        raise

    await asyncio.gather(*workers)
    logger.debug("throttle_all: %s", ScheduleState.ALL_SUCCEEDED.value)
    return [slot.value for slot in slots]  # type: ignore[misc]
