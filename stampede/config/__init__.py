from .loader import load_task_lines
from .types import ConfigError, RunConfig

__all__ = ["load_task_lines", "RunConfig", "ConfigError"]
