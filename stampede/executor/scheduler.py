from __future__ import annotations

import logging
import signal
import subprocess
import threading
from contextlib import contextmanager
from typing import Iterator

from stampede.config.types import RunConfig
from stampede.output.multiplexer import OutputMultiplexer
from stampede.output.writer import LineWriter
from stampede.tasks.types import Task

from .aggregator import Aggregator
from .cancel import Cancellation
from .runner import PopenFactory, TaskRunner
from .types import ResultChannel, Summary, TaskResult

logger = logging.getLogger(__name__)


class Scheduler:
    """Run every task concurrently behind a shared slot pool.

    One worker thread is started per task. Workers share the slot pool,
    the abort latch and the cancellation signal; each pushes exactly one
    result into the channel returned by ``start``, which is closed once
    every worker has finished.
    """

    def __init__(
        self,
        config: RunConfig,
        writer: LineWriter,
        *,
        popen: PopenFactory = subprocess.Popen,
    ):
        self.config = config
        self.writer = writer
        self.popen = popen
        self.abort = threading.Event()
        self.cancellation = Cancellation()

    def run(self, tasks: list[Task]) -> Summary:
        aggregator = Aggregator(self.writer, quiet=self.config.quiet)
        with self._signal_handlers():
            channel = self.start(tasks)
            return aggregator.consume(channel, len(tasks))

    def start(self, tasks: list[Task]) -> ResultChannel:
        capacity = self.config.slot_capacity(len(tasks))
        slots = threading.BoundedSemaphore(capacity)
        channel = ResultChannel(len(tasks))
        runner = TaskRunner(
            self.config,
            slots=slots,
            abort=self.abort,
            cancellation=self.cancellation,
            writer=self.writer,
            multiplexer=OutputMultiplexer(self.writer),
            popen=self.popen,
        )
        logger.debug("starting %d task(s) with %d slot(s)", len(tasks), capacity)

        workers = []
        for task in tasks:
            worker = threading.Thread(
                target=_work,
                args=(runner, task, channel),
                name=f"stampede-{task.label}",
            )
            worker.start()
            workers.append(worker)

        threading.Thread(
            target=_close_when_done,
            args=(workers, channel),
            name="stampede-closer",
            daemon=True,
        ).start()

        return channel

    def cancel(self, reason: str = "cancelled") -> None:
        if not self.cancellation.cancel(reason):
            return
        self.writer.write_plain(f"\n\nReceived signal: {reason}. Finishing running tasks...\n")

    @contextmanager
    def _signal_handlers(self) -> Iterator[None]:
        if not hasattr(signal, "SIGINT"):
            yield
            return

        original_sigint = signal.getsignal(signal.SIGINT)
        original_sigterm = signal.getsignal(signal.SIGTERM)

        def _handler(signum: int, _: object | None) -> None:
            try:
                name = signal.Signals(signum).name
            except ValueError:
                name = str(signum)
            self.cancel(name)

        try:
            signal.signal(signal.SIGINT, _handler)
            signal.signal(signal.SIGTERM, _handler)
        except ValueError:
            # Signal handlers can only be installed in main thread.
            yield
            return

        try:
            yield
        finally:
            signal.signal(signal.SIGINT, original_sigint)
            signal.signal(signal.SIGTERM, original_sigterm)


def _work(runner: TaskRunner, task: Task, channel: ResultChannel) -> None:
    try:
        result = runner.run(task)
    except Exception as exc:
        logger.exception("%s: unexpected runner failure", task.label)
        result = TaskResult.failed(task, exc)
    channel.put(result)


def _close_when_done(workers: list[threading.Thread], channel: ResultChannel) -> None:
    for worker in workers:
        worker.join()
    channel.close()
