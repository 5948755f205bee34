# ABOUTME: Bounded task queue: runs async tasks with a fixed cap on how many are in flight.
# ABOUTME: Enqueue never blocks; each task's result or error is delivered only to its own future.

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[T]]


class BoundedTaskQueue(Generic[T]):
    """Concurrency limiter for independently failing async tasks.

    Tasks wait in FIFO order and start only when fewer than ``concurrency``
    tasks are running. When a running task finishes (success or failure) one
    waiting task is promoted. There is no retry and no ordering guarantee on
    completion.
    """

    def __init__(self, concurrency: int) -> None:
        if not isinstance(concurrency, int) or concurrency < 1:
            raise ValueError(f"concurrency must be an integer >= 1, got {concurrency!r}")
        self._concurrency = concurrency
        self._active = 0
        self._waiting: deque[tuple[TaskFactory[T], asyncio.Future[T]]] = deque()
        # Strong references so running tasks are not garbage-collected mid-flight.
        self._runners: set[asyncio.Task[Any]] = set()

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def active_count(self) -> int:
        """Number of tasks currently running."""
        return self._active

    @property
    def waiting_count(self) -> int:
        """Number of tasks admitted but not yet started."""
        return len(self._waiting)

    def enqueue(self, task: TaskFactory[T]) -> "asyncio.Future[T]":
        """Admit a task and return a future for its eventual result.

        Must be called from inside a running event loop. The task factory is
        not invoked until a concurrency slot is free.
        """
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._waiting.append((task, future))
        self._promote()
        return future

    def _promote(self) -> None:
        while self._active < self._concurrency and self._waiting:
            task, future = self._waiting.popleft()
            if future.cancelled():
                continue
            self._active += 1
            runner = asyncio.ensure_future(self._run(task, future))
            self._runners.add(runner)
            runner.add_done_callback(self._runners.discard)

    async def _run(self, task: TaskFactory[T], future: "asyncio.Future[T]") -> None:
        try:
            result = await task()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:  # delivered to the task's own caller
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._active -= 1
            self._promote()
