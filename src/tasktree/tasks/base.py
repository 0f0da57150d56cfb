"""Composite task tree: the node, the tree and the builder in one type."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional

from .output import OutputSink

logger = logging.getLogger(__name__)

Action = Callable[["Task"], Any]
GroupBuilder = Callable[["Task"], Any]

INDENT = "  "


class TaskError(Exception):
    """Base class for task tree misuse."""


class InvalidTaskError(TaskError, ValueError):
    """Raised when a task is constructed or attached with invalid arguments."""


class IllegalTaskStateError(TaskError, RuntimeError):
    """Raised when execution reaches a leaf that has no action."""


class Task:
    """A named or anonymous node holding an optional action and ordered sub tasks.

    For an anonymous top level task::

        root = Task()

    For a named task with an action, which receives the task itself::

        task = Task("greet", lambda t: print(f"running {t.name}"))

    Grouping nodes are composed with :meth:`add_child` and :meth:`add_group`
    and the whole tree is run with :meth:`execute`. Children always run before
    the node's own action.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        action: Optional[Action] = None,
        *,
        output: Optional[OutputSink] = None,
    ) -> None:
        if action is not None and name is None:
            raise InvalidTaskError("Anonymous tasks are only allowed without an action.")
        self.name = name
        self.action = action
        self.output = output
        self.sub_tasks: List[Task] = []

    def add_child(self, task_or_name: "Task | str", action: Optional[Action] = None) -> "Task":
        """Append an existing task (shared by reference) or a new one built from a name."""

        if isinstance(task_or_name, Task):
            if action is not None:
                raise InvalidTaskError("An action cannot be given together with an existing task.")
            if any(node is self for node in task_or_name.tasks()):
                raise InvalidTaskError(f"Task {task_or_name._label()}cannot be attached beneath itself.")
            child = task_or_name
        else:
            child = Task(task_or_name, action)
        self.sub_tasks.append(child)
        return child

    def add_group(self, name: str, builder: GroupBuilder) -> "Task":
        """Append an action-less task and hand it to ``builder`` so it can be populated.

        Returns ``self`` so calls can be chained::

            root.add_group("compile", lambda g: g.add_child("lib", build_lib)).add_child("pack", pack)
        """

        group = Task(name)
        self.sub_tasks.append(group)
        builder(group)
        return self

    def execute(self, output: Optional[OutputSink] = None, indent: int = 0) -> None:
        """Run all sub tasks in order, depth first, then this task's own action."""

        sink = self._resolve_output(output)
        if self.is_leaf:
            self.call_action(sink, indent)
            return
        if self.name is not None:
            logger.debug("Entering group %s", self.name)
            sink.bright(f"{INDENT * indent}{self.name}\n")
            indent += 1
        for sub_task in self.sub_tasks:
            sub_task.execute(sink, indent)
        self.call_action(sink, indent)

    def call_action(self, output: Optional[OutputSink] = None, indent: int = 0) -> None:
        """Run this task's own action only, without its sub tasks."""

        if self.action is None:
            if self.is_leaf:
                raise IllegalTaskStateError(f"Leaf {self._label()}with undefined action is not allowed.")
            return
        sink = self._resolve_output(output)
        sink.bright(f"{INDENT * indent}{self.name}... ")
        logger.debug("Calling action of %s", self.name)
        try:
            self.action(self)
        except Exception as exc:
            logger.debug("Action of %s failed with %s", self.name, type(exc).__name__)
            sink.failure("[FAIL]\n")
            raise
        sink.success("[OK]\n")

    @property
    def is_leaf(self) -> bool:
        return not self.sub_tasks

    @property
    def has_action(self) -> bool:
        return self.action is not None

    @property
    def is_empty(self) -> bool:
        """True when neither this task nor any descendant has an action."""

        return next(self.tasks_with_action(), None) is None

    def length(self) -> int:
        """Number of tasks with an action in this subtree, grouping tasks excluded."""

        return sum((sub_task.length() for sub_task in self.sub_tasks), 1 if self.has_action else 0)

    size = length

    def tasks(self) -> Iterator["Task"]:
        """Yield this task and every descendant, depth first, pre-order."""

        yield self
        for sub_task in self.sub_tasks:
            yield from sub_task.tasks()

    def tasks_with_action(self) -> Iterator["Task"]:
        return (task for task in self.tasks() if task.has_action)

    def find(self, name: str) -> Optional["Task"]:
        """Return the first task with an action named ``name``, or ``None``."""

        return next((task for task in self.tasks_with_action() if task.name == name), None)

    def __getitem__(self, name: str) -> Optional["Task"]:
        return self.find(name)

    def __iter__(self) -> Iterator["Task"]:
        return self.tasks()

    def __repr__(self) -> str:
        return f"Task(name={self.name!r}, has_action={self.has_action}, sub_tasks={len(self.sub_tasks)})"

    def _resolve_output(self, output: Optional[OutputSink]) -> OutputSink:
        if output is not None:
            return output
        if self.output is not None:
            return self.output
        return OutputSink.stdout()

    def _label(self) -> str:
        return f'"{self.name}" ' if self.name is not None else ""
