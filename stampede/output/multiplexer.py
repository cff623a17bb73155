from __future__ import annotations

import logging
import threading
from typing import IO, Protocol

from stampede.tasks.types import Task

from .writer import LineWriter, Stream

logger = logging.getLogger(__name__)


class PipedProcess(Protocol):
    stdout: IO[bytes] | None
    stderr: IO[bytes] | None


class OutputMultiplexer:
    """Forward a process's stdout and stderr to a LineWriter line by line.

    Each stream gets its own reader thread. ``drain`` returns once both
    streams reached end-of-file.
    """

    def __init__(self, writer: LineWriter):
        self.writer = writer

    def drain(self, task: Task, process: PipedProcess) -> None:
        errors: list[BaseException] = []
        readers = []

        for pipe, stream in ((process.stdout, Stream.STDOUT), (process.stderr, Stream.STDERR)):
            if pipe is None:
                continue
            reader = threading.Thread(
                target=self._pump,
                args=(task, pipe, stream, errors),
                name=f"stampede-{task.label}-{stream.value}",
                daemon=True,
            )
            reader.start()
            readers.append(reader)

        for reader in readers:
            reader.join()

        if errors:
            raise errors[0]

    def _pump(
        self,
        task: Task,
        pipe: IO[bytes],
        stream: Stream,
        errors: list[BaseException],
    ) -> None:
        try:
            with pipe:
                for raw in iter(pipe.readline, b""):
                    self.writer.write(task, decode_line(raw), stream)
        except (OSError, ValueError) as exc:
            logger.debug("%s: %s reader failed: %s", task.label, stream.value, exc)
            errors.append(exc)
        logger.debug("%s: %s reached end of stream", task.label, stream.value)


def decode_line(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]
    return text
