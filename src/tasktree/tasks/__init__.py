"""Task primitives."""

from .base import IllegalTaskStateError, InvalidTaskError, Task, TaskError
from .output import OutputSink
from .runner import RunResult, TaskRunner

__all__ = [
    "Task",
    "TaskError",
    "InvalidTaskError",
    "IllegalTaskStateError",
    "OutputSink",
    "RunResult",
    "TaskRunner",
]
