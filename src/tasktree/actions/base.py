"""Base classes for configurable actions."""

from __future__ import annotations

from typing import Any, Optional

from ..tasks.base import Task


class ActionError(RuntimeError):
    """Raised by built-in actions when their unit of work fails."""

    def __init__(self, message: str, *, exit_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class Action:
    """Base action class.

    Instances are plain callables taking the owning task, so they can be
    handed to :class:`~tasktree.tasks.base.Task` like any other action.
    """

    name: str
    description: str

    def __init__(self, name: str, description: str | None = None, **kwargs: Any) -> None:
        self.name = name
        self.description = description or (self.__class__.__doc__ or "").strip()
        self.config = kwargs

    def __call__(self, task: Task) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, config={self.config!r})"
