from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    label: str
    command: str
    color_key: int


@dataclass(frozen=True)
class Layout:
    width: int

    def padding(self, label: str) -> str:
        return " " * max(0, self.width - len(label))


def compute_layout(tasks: list[Task]) -> Layout:
    width = 0
    for task in tasks:
        if len(task.label) > width:
            width = len(task.label)
    return Layout(width)
