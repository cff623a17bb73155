from dataclasses import dataclass
from pathlib import Path


@dataclass
class RunConfig:
    source: Path | None = None
    quiet: bool = False
    raw: bool = False
    no_color: bool = False
    max_parallel: int = 0
    abort_on_fail: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.max_parallel < 0:
            raise ConfigError(f"max must be 0 (unlimited) or positive, got {self.max_parallel}")

        # Raw output carries no attribution, so announcements would be noise.
        if self.raw:
            self.quiet = True

    @property
    def color(self) -> bool:
        return not self.no_color

    def slot_capacity(self, task_count: int) -> int:
        if self.max_parallel == 0:
            return max(1, task_count)
        return self.max_parallel


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
