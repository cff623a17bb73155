from .parser import color_key, infer_label, parse_tasks
from .types import Layout, Task, compute_layout

__all__ = ["parse_tasks", "infer_label", "color_key", "compute_layout", "Layout", "Task"]
