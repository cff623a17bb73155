from __future__ import annotations

import os
from typing import Iterable

from stampede.output.colors import PALETTE_SIZE

from .types import Task

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_DEFAULT_LABEL = "task"


def parse_tasks(lines: Iterable[str]) -> list[Task]:
    tasks: list[Task] = []
    label_count: dict[str, int] = {}

    for line in lines:
        line = line.strip()
        if not line:
            continue

        label, command = _split_label(line)
        if not label:
            label = infer_label(command)

        base = label
        count = label_count.get(base, 0)
        if count > 0:
            label = f"{base} ({count + 1})"
        label_count[base] = count + 1

        tasks.append(Task(label=label, command=command, color_key=color_key(label)))

    return tasks


def infer_label(command: str) -> str:
    fields = command.split()
    if not fields:
        return _DEFAULT_LABEL

    # A trailing separator names the directory itself, as in "./dir/".
    base = os.path.basename(fields[0].rstrip("/" + os.sep))
    stem, _ = os.path.splitext(base)
    return stem or _DEFAULT_LABEL


def color_key(label: str) -> int:
    return fnv1a_32(label.encode("utf-8")) % PALETTE_SIZE


def fnv1a_32(data: bytes) -> int:
    h = _FNV_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def _split_label(line: str) -> tuple[str, str]:
    if not line.startswith("["):
        return "", line

    end = line.find("]")
    if end < 0:
        return "", line

    return line[1:end], line[end + 1 :].strip()
