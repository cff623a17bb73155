import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import ConfigError

logger = logging.getLogger(__name__)


def load_task_lines(path: str | Path) -> list[str]:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Task file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Task path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    try:
        text = pure_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{pure_path}: cannot read task file: {exc}") from exc

    if fmt == "text":
        lines = _parse_text(text)
    else:
        lines = _build_task_lines(pure_path, _parse_structured(pure_path, text, fmt))

    logger.debug("loaded %d task line(s) from %s (%s)", len(lines), pure_path, fmt)
    return lines


def _detect_format(path: Path) -> str:
    match path.suffix:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            return "text"


def _parse_text(text: str) -> list[str]:
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            lines.append(line)
    return lines


def _parse_structured(path: Path, text: str, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_task_lines(path: Path, raw: Mapping[str, Any]) -> list[str]:
    if "tasks" not in raw:
        raise ConfigError(f"{path}: missing 'tasks' field")

    tasks = raw["tasks"]
    if tasks is None:
        return []

    lines = []
    if isinstance(tasks, Mapping):
        for label, command in tasks.items():
            if not isinstance(label, str):
                raise ConfigError(f"{path}: task label must be a string, got {type(label)}")
            if not isinstance(command, str):
                raise ConfigError(f"{path}: {label}: the command should be a string")

            label_norm = label.strip()
            command_norm = command.strip()
            if "]" in label_norm:
                raise ConfigError(f"{path}: {label}: a label can't contain ']'")
            if len(command_norm) < 1:
                raise ConfigError(f"{path}: {label}: command missing")

            lines.append(f"[{label_norm}] {command_norm}")

    elif isinstance(tasks, list):
        for item in tasks:
            if not isinstance(item, str):
                raise ConfigError(f"{path}: {item!r} should be a string in the task list")
            line = item.strip()
            if line and not line.startswith("#"):
                lines.append(line)

    else:
        raise ConfigError(f"{path}: 'tasks' must be a list or a mapping, got {type(tasks)}")

    return lines
