"""Configuration helpers for task tree project files."""

from __future__ import annotations

import importlib
import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import yaml

from .tasks.output import COLOR_MODES


class ConfigError(RuntimeError):
    """Raised when configuration files are invalid."""


@dataclass
class OutputSpec:
    """How progress is reported."""

    color: str = "auto"
    header: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "OutputSpec":
        if not data:
            return cls()
        color = str(data.get("color", "auto")).lower()
        if color not in COLOR_MODES:
            raise ConfigError(f"Output color must be one of {', '.join(COLOR_MODES)}, got '{color}'")
        return cls(color=color, header=bool(data.get("header", True)))


@dataclass
class ActionSpec:
    """A reusable, named action definition."""

    name: str
    type: str
    args: Dict[str, Any] = field(default_factory=dict)
    description: Optional[str] = None

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, Any]) -> "ActionSpec":
        if not isinstance(data, Mapping) or "type" not in data:
            raise ConfigError(f"Action '{name}' requires a type")
        return cls(
            name=name,
            type=str(data["type"]),
            args=dict(data.get("args") or {}),
            description=data.get("description"),
        )


@dataclass
class TaskNodeSpec:
    """One node of the task tree as written in the project file."""

    name: Optional[str]
    action: Optional[str] = None
    args: Dict[str, Any] = field(default_factory=dict)
    tasks: List["TaskNodeSpec"] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Any, path: str = "tasks") -> "TaskNodeSpec":
        if not isinstance(data, Mapping):
            raise ConfigError(f"{path}: task entries must be mappings")
        name = data.get("name")
        action = data.get("action")
        if action is not None and name is None:
            raise ConfigError(f"{path}: a task with an action requires a name")
        if data.get("args") and action is None:
            raise ConfigError(f"{path}: args given without an action")
        label = f"{path}.{name}" if name is not None else path
        children = data.get("tasks") or []
        if not isinstance(children, list):
            raise ConfigError(f"{label}: 'tasks' must be a list")
        return cls(
            name=None if name is None else str(name),
            action=None if action is None else str(action),
            args=dict(data.get("args") or {}),
            tasks=[cls.from_mapping(item, f"{label}[{index}]") for index, item in enumerate(children)],
        )


@dataclass
class ProjectConfig:
    """Representation of the YAML project file."""

    name: str
    description: Optional[str]
    output: OutputSpec
    action_specs: Dict[str, ActionSpec]
    tasks: List[TaskNodeSpec]

    @classmethod
    def from_file(cls, path: str | pathlib.Path) -> "ProjectConfig":
        path = pathlib.Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration '{path}': {exc.strerror or exc}") from exc
        return cls.from_yaml(text, default_name=path.stem)

    @classmethod
    def from_yaml(cls, text: str, *, default_name: str = "project") -> "ProjectConfig":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError("Configuration root must be a mapping")
        return cls.from_mapping(data, default_name=default_name)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, default_name: str = "project") -> "ProjectConfig":
        raw_tasks = data.get("tasks")
        if not raw_tasks:
            raise ConfigError("At least one task must be defined")
        if not isinstance(raw_tasks, list):
            raise ConfigError("'tasks' must be a list")
        raw_actions = data.get("actions") or {}
        if not isinstance(raw_actions, Mapping):
            raise ConfigError("'actions' must be a mapping of name to definition")
        return cls(
            name=str(data.get("name") or default_name),
            description=data.get("description"),
            output=OutputSpec.from_mapping(data.get("output")),
            action_specs={
                str(name): ActionSpec.from_mapping(str(name), info) for name, info in raw_actions.items()
            },
            tasks=[TaskNodeSpec.from_mapping(item, f"tasks[{index}]") for index, item in enumerate(raw_tasks)],
        )

    @property
    def root_name(self) -> Optional[str]:
        return self.name if self.output.header else None


def import_string(path: str) -> Any:
    """Return attribute from module specified by path "module:qualname"."""

    if ":" not in path:
        raise ConfigError(f"Import path '{path}' must use module:qualname format")
    module_path, attr = path.split(":", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigError(f"Cannot import module '{module_path}': {exc}") from exc
    target: Any = module
    try:
        for part in attr.split("."):
            target = getattr(target, part)
    except AttributeError as exc:
        raise ConfigError(f"Module '{module_path}' has no attribute '{attr}'") from exc
    return target
