from __future__ import annotations

import logging
import subprocess
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

logger = logging.getLogger(__name__)

TERMINATE_GRACE_SECONDS = 2.0


class Terminable(Protocol):
    pid: int

    def poll(self) -> int | None: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...

    def wait(self, timeout: float | None = None) -> int: ...


class Cancellation:
    """One-shot cancellation signal shared by every task runner.

    Live processes are registered while they run; cancelling terminates
    all of them and every process registered afterwards.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._live: set[Terminable] = set()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> bool:
        """Trigger cancellation. Return False if it was already triggered."""
        with self._lock:
            if self._event.is_set():
                return False
            self.reason = reason
            self._event.set()
            live = list(self._live)

        logger.debug("cancellation requested (%s), terminating %d process(es)", reason, len(live))
        for process in live:
            terminate_process(process)
        return True

    @contextmanager
    def track(self, process: Terminable) -> Iterator[None]:
        with self._lock:
            self._live.add(process)
            already_cancelled = self._event.is_set()

        if already_cancelled:
            terminate_process(process)

        try:
            yield
        finally:
            with self._lock:
                self._live.discard(process)


def terminate_process(process: Terminable) -> None:
    if process.poll() is not None:
        return
    try:
        process.terminate()
    except OSError:
        return
    threading.Thread(
        target=_reap,
        args=(process,),
        name=f"stampede-reap-{process.pid}",
        daemon=True,
    ).start()


def _reap(process: Terminable) -> None:
    try:
        process.wait(timeout=TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        logger.debug("process %s ignored terminate, killing", process.pid)
        try:
            process.kill()
        except OSError:
            return
