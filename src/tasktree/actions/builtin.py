"""Built-in actions usable from project files."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from typing import Any, Dict, Sequence

from ..tasks.base import Task
from .base import Action, ActionError
from .registry import ActionRegistry

logger = logging.getLogger(__name__)


def _tail(text: str, *, limit: int = 400) -> str:
    text = (text or "").strip()
    if len(text) > limit:
        return "..." + text[-limit:]
    return text


class ShellAction(Action):
    """Run a shell command; a non-zero exit status fails the task."""

    def __init__(self, name: str, description: str | None = None, **kwargs: Any) -> None:
        super().__init__(name, description, **kwargs)
        command = self.config.get("command")
        if not command:
            raise ValueError(f"Action '{name}' requires a command")
        if not isinstance(command, (str, list, tuple)):
            raise ValueError(f"Action '{name}' command must be a string or a list of arguments")
        self.command: str | Sequence[str] = command if isinstance(command, str) else [str(arg) for arg in command]
        self.cwd = self.config.get("cwd")
        self.timeout = float(self.config.get("timeout", 600))
        self.env: Dict[str, str] = {str(k): str(v) for k, v in (self.config.get("env") or {}).items()}

    def __call__(self, task: Task) -> subprocess.CompletedProcess:
        shell = isinstance(self.command, str)
        env = {**os.environ, **self.env} if self.env else None
        logger.debug("Task %s runs %r", task.name, self.command)
        label = self.command if shell else " ".join(self.command)
        try:
            proc = subprocess.run(
                self.command,
                shell=shell,
                cwd=self.cwd,
                env=env,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise ActionError(f"{label}: command not found", exit_code=127) from exc
        except subprocess.TimeoutExpired as exc:
            raise ActionError(f"{label}: timeout after {self.timeout:g}s") from exc
        if proc.stdout:
            logger.debug("%s stdout:\n%s", task.name, proc.stdout.rstrip())
        if proc.returncode != 0:
            detail = _tail(proc.stderr) or _tail(proc.stdout) or "<no output>"
            raise ActionError(f"{label}: exit {proc.returncode}: {detail}", exit_code=proc.returncode)
        return proc


class LogAction(Action):
    """Log a message; ``{task}`` is replaced with the task name."""

    def __call__(self, task: Task) -> str:
        message = str(self.config.get("message", "{task}")).replace("{task}", task.name or "")
        level = logging.getLevelName(str(self.config.get("level", "INFO")).upper())
        if not isinstance(level, int):
            level = logging.INFO
        logger.log(level, message)
        return message


class SleepAction(Action):
    """Pause for a number of seconds."""

    def __call__(self, task: Task) -> None:
        seconds = float(self.config.get("seconds", 0))
        if seconds < 0:
            raise ValueError(f"Task {task.name} cannot sleep for negative time")
        time.sleep(seconds)


class FailAction(Action):
    """Always fail, with an optional message."""

    def __call__(self, task: Task) -> None:
        message = str(self.config.get("message", "{task} failed")).replace("{task}", task.name or "")
        raise ActionError(message)


BUILTIN_ACTIONS = {
    "shell": ShellAction,
    "log": LogAction,
    "sleep": SleepAction,
    "fail": FailAction,
}


def register_builtin_actions(registry: ActionRegistry) -> None:
    """Register built-in action factories."""

    for name, cls in BUILTIN_ACTIONS.items():
        registry.register_factory(
            name,
            lambda _cls=cls, _name=name, **args: _cls(name=_name, **args),
            description=(cls.__doc__ or "").strip(),
            overwrite=True,
        )
