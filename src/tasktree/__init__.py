"""Hierarchical, depth-first task runner."""

from importlib import metadata

from .tasks import (
    IllegalTaskStateError,
    InvalidTaskError,
    OutputSink,
    RunResult,
    Task,
    TaskError,
    TaskRunner,
)

try:
    __version__ = metadata.version("tasktree")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for dev
    __version__ = "0.0.0"

__all__ = [
    "Task",
    "TaskError",
    "InvalidTaskError",
    "IllegalTaskStateError",
    "OutputSink",
    "RunResult",
    "TaskRunner",
    "__version__",
]
