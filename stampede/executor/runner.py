from __future__ import annotations

import logging
import shlex
import subprocess
import threading
from enum import Enum, auto
from typing import Any, Callable

from stampede.config.types import RunConfig
from stampede.output.multiplexer import OutputMultiplexer
from stampede.output.writer import LineWriter, Stream
from stampede.tasks.types import Task

from .cancel import Cancellation
from .types import (
    AbortedBeforeStart,
    ExternalCancellation,
    LaunchError,
    ParseError,
    TaskResult,
)

logger = logging.getLogger(__name__)

PopenFactory = Callable[..., Any]


class TaskState(Enum):
    PENDING = auto()
    SLOT_WAIT = auto()
    LAUNCHING = auto()
    RUNNING = auto()
    DRAINING = auto()
    DONE = auto()


class TaskRunner:
    """Own the lifecycle of a single task, from slot acquisition to result.

    ``run`` always returns exactly one TaskResult and always releases the
    concurrency slot it acquired. Setting the abort latch never touches
    processes that are already running; only ``cancellation`` terminates
    them.
    """

    def __init__(
        self,
        config: RunConfig,
        *,
        slots: threading.BoundedSemaphore,
        abort: threading.Event,
        cancellation: Cancellation,
        writer: LineWriter,
        multiplexer: OutputMultiplexer,
        popen: PopenFactory = subprocess.Popen,
    ):
        self.config = config
        self.slots = slots
        self.abort = abort
        self.cancellation = cancellation
        self.writer = writer
        self.multiplexer = multiplexer
        self.popen = popen

    def run(self, task: Task) -> TaskResult:
        self._enter(task, TaskState.PENDING)
        self._enter(task, TaskState.SLOT_WAIT)
        with self.slots:
            result = self._run_in_slot(task)
        self._enter(task, TaskState.DONE, f"exit code {result.exit_code}")
        return result

    def _run_in_slot(self, task: Task) -> TaskResult:
        if self.abort.is_set():
            return TaskResult.failed(task, AbortedBeforeStart("aborted"))

        if self.cancellation.cancelled:
            return TaskResult.failed(task, ExternalCancellation("cancelled"))

        self._enter(task, TaskState.LAUNCHING)
        try:
            argv = tokenize(task.command)
        except ParseError as exc:
            return TaskResult.failed(task, exc)

        if not self.config.quiet:
            self.writer.write(task, f"Running: {task.command}", Stream.STDOUT)

        try:
            process = self._spawn(argv)
        except LaunchError as exc:
            return TaskResult.failed(task, exc)

        with self.cancellation.track(process):
            self._enter(task, TaskState.RUNNING, f"pid {process.pid}")
            try:
                self.multiplexer.drain(task, process)
            finally:
                self._enter(task, TaskState.DRAINING)
                returncode = process.wait()

        if returncode != 0 and self.config.abort_on_fail:
            if not self.abort.is_set():
                logger.debug("%s: exited with %d, setting abort latch", task.label, returncode)
            self.abort.set()

        return TaskResult(task, returncode)

    def _spawn(self, argv: list[str]) -> Any:
        try:
            return self.popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise LaunchError(f"command not found: {argv[0]}") from exc
        except PermissionError as exc:
            raise LaunchError(f"permission denied: {argv[0]}") from exc
        except OSError as exc:
            raise LaunchError(f"failed to start {argv[0]}: {exc}") from exc

    def _enter(self, task: Task, state: TaskState, detail: str = "") -> None:
        if detail:
            logger.debug("%s: %s (%s)", task.label, state.name, detail)
        else:
            logger.debug("%s: %s", task.label, state.name)


def tokenize(command: str) -> list[str]:
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        raise ParseError(f"cannot parse command: {exc}") from exc

    if not argv:
        raise ParseError("empty command")

    return argv

