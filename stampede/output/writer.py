from __future__ import annotations

import sys
import threading
from enum import Enum
from typing import TextIO

from stampede.tasks.types import Layout, Task

from .colors import RESET, color_code


class Stream(Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


class LineWriter:
    """Render output lines attributed to a task.

    Labeled mode prefixes every line with the task label, padded to the
    layout width, followed by a `` | `` separator. Raw mode writes the text
    unchanged. Each call emits exactly one newline-terminated line under a
    shared lock, so lines from concurrent tasks never merge.
    """

    def __init__(
        self,
        layout: Layout,
        *,
        raw: bool = False,
        color: bool = True,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.layout = layout
        self.raw = raw
        self.color = color
        self._stdout = stdout
        self._stderr = stderr
        # Reentrant: signal handlers on the main thread may write while it holds the lock.
        self._lock = threading.RLock()

    def format(self, task: Task, text: str) -> str:
        if self.raw:
            return text + "\n"

        color = ""
        reset = ""
        if self.color:
            color = color_code(task.color_key)
            reset = RESET
        padding = self.layout.padding(task.label)
        return f"{color}{task.label}{padding} |{reset} {text}\n"

    def write(self, task: Task, text: str, stream: Stream = Stream.STDOUT) -> None:
        line = self.format(task, text)
        target = self._target(stream)
        with self._lock:
            target.write(line)
            target.flush()

    def write_plain(self, text: str, stream: Stream = Stream.STDOUT) -> None:
        target = self._target(stream)
        with self._lock:
            target.write(text)
            target.flush()

    def _target(self, stream: Stream) -> TextIO:
        # Resolved per call so that redirected sys streams are honored.
        match stream:
            case Stream.STDOUT:
                return self._stdout or sys.stdout
            case Stream.STDERR:
                return self._stderr or sys.stderr
            case _:
                raise AssertionError("Unreachable")
