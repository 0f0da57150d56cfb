"""Registry that keeps track of available actions."""

from __future__ import annotations

from typing import Any, Callable, Dict, Set

from ..config import ActionSpec, import_string
from .base import Action

ActionFactory = Callable[..., Action]


class ActionRegistry:
    """Stores action factories; every lookup builds a fresh, configured action."""

    def __init__(self) -> None:
        self._factories: Dict[str, ActionFactory] = {}
        self._descriptions: Dict[str, str] = {}
        self._resolving: Set[str] = set()

    def register_factory(
        self,
        name: str,
        factory: ActionFactory,
        *,
        description: str = "",
        overwrite: bool = False,
    ) -> None:
        if name in self._factories and not overwrite:
            raise ValueError(f"Action factory {name} already registered")
        self._factories[name] = factory
        self._descriptions[name] = description

    def register_from_spec(self, spec: ActionSpec) -> None:
        # A spec named after its own type shadows that factory, so keep the original.
        shadowed = self._factories.get(spec.type) if spec.type == spec.name else None

        def factory(**overrides: Any) -> Action:
            args = {**spec.args, **overrides}
            base = shadowed if spec.type == spec.name else self._factories.get(spec.type)
            if base is not None:
                if spec.name in self._resolving:
                    raise ValueError(f"Action '{spec.name}' is defined in terms of itself")
                self._resolving.add(spec.name)
                try:
                    return base(**args)
                finally:
                    self._resolving.discard(spec.name)
            cls = import_string(spec.type)
            if not isinstance(cls, type) or not issubclass(cls, Action):
                raise TypeError(f"Action '{spec.name}' must inherit Action")
            return cls(name=spec.name, **args)

        description = spec.description or self._descriptions.get(spec.type) or f"Configured from {spec.type}"
        self.register_factory(spec.name, factory, description=description, overwrite=True)

    def configure_from_specs(self, specs: Dict[str, ActionSpec]) -> None:
        for spec in specs.values():
            self.register_from_spec(spec)

    def create(self, name: str, **args: Any) -> Action:
        if name not in self._factories:
            raise KeyError(f"Action {name} not registered")
        return self._factories[name](**args)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def available(self) -> Dict[str, str]:
        """Map each registered name to its description."""

        return dict(self._descriptions)
