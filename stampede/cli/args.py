from __future__ import annotations

import argparse

USAGE = """\
  stampede [options] '[label] command' '[label] command' ...
  stampede --from tasks.txt"""

EPILOG = """\
examples:
  # Run commands with optional labels (labels in square brackets)
  stampede "[Google] ping -c 3 8.8.8.8" "[Cloudflare] ping -c 3 1.1.1.1"

  # Run commands without labels; labels will be inferred from executable names
  stampede "ping -c 3 8.8.8.8" "ping -c 3 1.1.1.1"

  # Load commands from file (one per line, optional labels allowed)
  stampede --from commands.txt
"""


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 (unlimited) or positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stampede",
        usage=USAGE,
        description="Run shell commands concurrently with labeled output.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "tasks",
        nargs="*",
        metavar="TASK",
        help="Task as '[label] command'; the label is optional",
    )
    parser.add_argument(
        "-f",
        "--from",
        dest="source",
        metavar="PATH",
        help="Load tasks from file",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress command run messages and summary",
    )
    parser.add_argument(
        "-r",
        "--raw",
        action="store_true",
        help="Disable output labels and suppress extra logs (implies quiet mode)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable color output",
    )
    parser.add_argument(
        "--max",
        type=_non_negative_int,
        default=0,
        metavar="N",
        help="Maximum concurrent tasks (0 = unlimited)",
    )
    parser.add_argument(
        "-a",
        "--abort-on-fail",
        action="store_true",
        help="Do not start remaining tasks once any task fails",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log scheduling details to stderr",
    )

    return parser
