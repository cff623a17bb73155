from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Iterator, cast

from stampede.tasks.types import Task

ERROR_EXIT_CODE = -1


class TaskError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class ParseError(TaskError):
    pass


class LaunchError(TaskError):
    pass


class AbortedBeforeStart(TaskError):
    pass


class ExternalCancellation(TaskError):
    pass


@dataclass(frozen=True)
class TaskResult:
    task: Task
    exit_code: int
    error: BaseException | None = None

    @classmethod
    def failed(cls, task: Task, error: BaseException) -> TaskResult:
        return cls(task, ERROR_EXIT_CODE, error)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def detail(self) -> str:
        if self.error is not None:
            return str(self.error) or type(self.error).__name__
        return f"exit status {self.exit_code}"


@dataclass(frozen=True)
class Summary:
    total: int
    succeeded: int
    failed: int
    failed_labels: tuple[str, ...]
    results: tuple[TaskResult, ...]

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


_CLOSED = object()


class ResultChannel:
    """Fan-in queue of task results, closed once every producer is done."""

    def __init__(self, capacity: int):
        # One extra slot for the close marker so close() never blocks.
        self._queue: queue.Queue[object] = queue.Queue(maxsize=capacity + 1)
        self._closed = False

    def put(self, result: TaskResult) -> None:
        if self._closed:
            raise RuntimeError("put on closed result channel")
        self._queue.put(result)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[TaskResult]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield cast(TaskResult, item)
