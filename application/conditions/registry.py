# application/conditions/registry.py
from __future__ import annotations

from typing import Any, Callable, Dict, List

from application.conditions.base import ConditionPlugin
from application.conditions.token_matcher import TokenMatcherCondition
from application.services.condition_deps import ConditionDeps
from domain.exceptions import PluginNotFoundError

PluginFactory = Callable[[Dict[str, Any], ConditionDeps], ConditionPlugin]


def _token_matcher_factory(configuration: Dict[str, Any], deps: ConditionDeps) -> ConditionPlugin:
    return TokenMatcherCondition(
        configuration,
        token_service=deps.token_service,
        entity_type_registry=deps.entity_type_registry,
        request_stack=deps.request_stack,
        module_handler=deps.module_handler,
        logger=deps.logger,
    )


class ConditionPluginRegistry:
    def __init__(self, factories: Dict[str, PluginFactory]):
        self._factories = dict(factories)

    def register(self, plugin_id: str, factory: PluginFactory) -> None:
        self._factories[plugin_id] = factory

    def has(self, plugin_id: str) -> bool:
        return plugin_id in self._factories

    def plugin_ids(self) -> List[str]:
        return sorted(self._factories.keys())

    def create_instance(
        self, plugin_id: str, configuration: Dict[str, Any], deps: ConditionDeps
    ) -> ConditionPlugin:
        factory = self._factories.get(plugin_id)
        if factory is None:
            raise PluginNotFoundError(f"No condition plugin found: {plugin_id}")
        return factory(configuration, deps)

    @classmethod
    def default(cls) -> "ConditionPluginRegistry":
        return cls({TokenMatcherCondition.plugin_id: _token_matcher_factory})
