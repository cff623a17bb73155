import pytest

from stampede.output.colors import PALETTE_SIZE
from stampede.tasks.parser import color_key, fnv1a_32, infer_label, parse_tasks
from stampede.tasks.types import Layout, Task, compute_layout


def _labels(lines: list[str]) -> list[str]:
    return [t.label for t in parse_tasks(lines)]


def test_explicit_label_and_command():
    (task,) = parse_tasks(["[Google]   ping -c 3 8.8.8.8"])
    assert task.label == "Google"
    assert task.command == "ping -c 3 8.8.8.8"


def test_missing_closing_bracket_is_plain_command():
    (task,) = parse_tasks(["[oops ping -c 1 host"])
    assert task.command == "[oops ping -c 1 host"
    assert task.label == "[oops"


@pytest.mark.parametrize(
    "command, label",
    [
        ("ping -c 3 8.8.8.8", "ping"),
        ("./scripts/check.sh --fast", "check"),
        ("/usr/bin/python3.12 -V", "python3"),
        ("make", "make"),
        ("archive.tar.gz", "archive.tar"),
        ("./dir/ x", "dir"),
        ("/opt/tools// run", "tools"),
        ("/ x", "task"),
    ],
)
def test_inferred_label_from_first_token(command: str, label: str):
    assert infer_label(command) == label


def test_empty_explicit_label_falls_back_to_inference():
    (task,) = parse_tasks(["[] ls -la"])
    assert task.label == "ls"
    assert task.command == "ls -la"


def test_empty_command_gets_default_label():
    (task,) = parse_tasks(["[]"])
    assert task.label == "task"
    assert task.command == ""


def test_blank_lines_are_skipped():
    assert _labels(["", "   ", "echo hi"]) == ["echo"]


def test_duplicate_labels_are_suffixed_with_occurrence():
    labels = _labels(
        [
            "ping -c 1 a",
            "ping -c 1 b",
            "[ping] ping -c 1 c",
            "echo x",
        ]
    )
    assert labels == ["ping", "ping (2)", "ping (3)", "echo"]


def test_color_key_is_derived_from_disambiguated_label():
    tasks = parse_tasks(["echo a", "echo b"])
    assert tasks[0].color_key == color_key("echo")
    assert tasks[1].color_key == color_key("echo (2)")


def test_color_key_is_deterministic_and_in_range():
    for label in ["a", "build", "ping (2)", "ünïcode"]:
        key = color_key(label)
        assert key == color_key(label)
        assert 0 <= key < PALETTE_SIZE


def test_fnv1a_known_vectors():
    assert fnv1a_32(b"") == 0x811C9DC5
    assert fnv1a_32(b"a") == 0xE40C292C
    assert fnv1a_32(b"foobar") == 0xBF9CF968


def test_no_lines_yields_no_tasks():
    assert parse_tasks([]) == []


def test_task_is_immutable():
    task = Task("a", "echo a", 0)
    with pytest.raises(AttributeError):
        task.label = "b"  # type: ignore[misc]


def test_layout_width_is_longest_label():
    tasks = parse_tasks(["[a] true", "[longer] true", "[mid] true"])
    layout = compute_layout(tasks)
    assert layout == Layout(6)
    assert layout.padding("a") == "     "
    assert layout.padding("longer") == ""


def test_layout_of_no_tasks():
    assert compute_layout([]).width == 0
