from __future__ import annotations

import argparse
import sys
from pathlib import Path

from stampede.config import ConfigError, RunConfig, load_task_lines
from stampede.executor import Scheduler, Summary
from stampede.output import LineWriter
from stampede.tasks import Task, compute_layout, parse_tasks

from .args import build_parser
from .logging_setup import setup_logging


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        config = _config_from(args)
        setup_logging(config.verbose)

        tasks = _load_tasks(config, args.tasks)
        if len(tasks) == 0:
            print("No tasks provided.\n", file=sys.stderr)
            parser.print_help(sys.stderr)
            return 1

        summary = cmd_run(config, tasks)
        return summary.exit_code

    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        return 130


def cmd_run(config: RunConfig, tasks: list[Task]) -> Summary:
    writer = LineWriter(compute_layout(tasks), raw=config.raw, color=config.color)
    scheduler = Scheduler(config, writer)
    return scheduler.run(tasks)


def _config_from(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        source=Path(args.source) if args.source else None,
        quiet=args.quiet,
        raw=args.raw,
        no_color=args.no_color,
        max_parallel=args.max,
        abort_on_fail=args.abort_on_fail,
        verbose=args.verbose,
    )


def _load_tasks(config: RunConfig, positional: list[str]) -> list[Task]:
    if config.source is not None:
        lines = load_task_lines(config.source)
    else:
        lines = positional
    return parse_tasks(lines)
