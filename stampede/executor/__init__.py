from .aggregator import Aggregator
from .cancel import Cancellation
from .runner import TaskRunner, TaskState, tokenize
from .scheduler import Scheduler
from .types import (
    ERROR_EXIT_CODE,
    AbortedBeforeStart,
    ExternalCancellation,
    LaunchError,
    ParseError,
    ResultChannel,
    Summary,
    TaskError,
    TaskResult,
)

__all__ = [
    "Aggregator",
    "Cancellation",
    "Scheduler",
    "TaskRunner",
    "TaskState",
    "tokenize",
    "ERROR_EXIT_CODE",
    "AbortedBeforeStart",
    "ExternalCancellation",
    "LaunchError",
    "ParseError",
    "ResultChannel",
    "Summary",
    "TaskError",
    "TaskResult",
]
