from __future__ import annotations

from typing import Iterable

from stampede.output.writer import LineWriter, Stream

from .types import Summary, TaskResult


class Aggregator:
    def __init__(self, writer: LineWriter, *, quiet: bool = False):
        self.writer = writer
        self.quiet = quiet

    def consume(self, results: Iterable[TaskResult], total: int) -> Summary:
        """Drain ``results`` until exhausted and report the outcome.

        Failed labels are kept in arrival order, which follows completion
        timing rather than task definition order.
        """
        collected: list[TaskResult] = []
        failed_labels: list[str] = []
        succeeded = 0
        failed = 0

        for result in results:
            collected.append(result)
            if result.ok:
                succeeded += 1
                continue

            failed += 1
            failed_labels.append(result.task.label)
            self.writer.write(result.task, f"Error: {result.detail}", Stream.STDERR)

        summary = Summary(
            total=total,
            succeeded=succeeded,
            failed=failed,
            failed_labels=tuple(failed_labels),
            results=tuple(collected),
        )

        if not self.quiet:
            print_summary(self.writer, summary)

        return summary


def print_summary(writer: LineWriter, summary: Summary) -> None:
    lines = [
        f"\nTasks finished: {summary.succeeded} / {summary.total} succeeded, "
        f"{summary.failed} failed\n"
    ]
    if summary.failed > 0:
        lines.append(f"Failed tasks: {', '.join(summary.failed_labels)}\n")
    else:
        lines.append("All tasks completed successfully!\n")
    writer.write_plain("".join(lines))
