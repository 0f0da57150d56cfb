"""Builds runnable task trees from project configuration."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .actions.base import Action
from .actions.builtin import register_builtin_actions
from .actions.registry import ActionRegistry
from .config import ConfigError, ProjectConfig, TaskNodeSpec, import_string
from .tasks.base import Task
from .tasks.output import OutputSink

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Resolves action references and assembles the configured task tree."""

    def __init__(self, project_config: ProjectConfig, registry: Optional[ActionRegistry] = None) -> None:
        self.config = project_config
        if registry is None:
            registry = ActionRegistry()
            register_builtin_actions(registry)
        self.registry = registry
        self.registry.configure_from_specs(self.config.action_specs)

    def build(self, output: Optional[OutputSink] = None) -> Task:
        root = Task(self.config.root_name, output=output)
        for node in self.config.tasks:
            self._attach(root, node)
        logger.debug("Built tree %s with %d action(s)", self.config.name, root.length())
        return root

    def _attach(self, parent: Task, node: TaskNodeSpec) -> None:
        if node.name is None:
            child = parent.add_child(Task())
        else:
            action = self._resolve_action(node) if node.action is not None else None
            child = parent.add_child(node.name, action)
        for sub_node in node.tasks:
            self._attach(child, sub_node)

    def _resolve_action(self, node: TaskNodeSpec) -> Callable[[Task], Any]:
        ref = node.action or ""
        if ref in self.registry:
            try:
                return self.registry.create(ref, **node.args)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Task '{node.name}': cannot configure action '{ref}': {exc}") from exc
        if ":" not in ref:
            raise ConfigError(f"Task '{node.name}' references unknown action '{ref}'")
        target = import_string(ref)
        if isinstance(target, type):
            if not issubclass(target, Action):
                raise ConfigError(f"Task '{node.name}': '{ref}' must inherit Action")
            try:
                return target(name=node.name, **node.args)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Task '{node.name}': cannot configure action '{ref}': {exc}") from exc
        if not callable(target):
            raise ConfigError(f"Task '{node.name}': '{ref}' is not callable")
        if node.args:
            args = dict(node.args)
            return lambda task: target(task, **args)
        return target


def build_tree(
    project_config: ProjectConfig,
    registry: Optional[ActionRegistry] = None,
    output: Optional[OutputSink] = None,
) -> Task:
    """Shortcut for ``TreeBuilder(project_config, registry).build(output)``."""

    return TreeBuilder(project_config, registry).build(output)
