"""Action abstractions and registries."""

from .base import Action, ActionError
from .builtin import FailAction, LogAction, ShellAction, SleepAction, register_builtin_actions
from .registry import ActionRegistry

__all__ = [
    "Action",
    "ActionError",
    "ActionRegistry",
    "FailAction",
    "LogAction",
    "ShellAction",
    "SleepAction",
    "register_builtin_actions",
]
