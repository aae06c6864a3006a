# tests/application/conditions/test_plugin_registry.py
import pytest

from application.conditions.base import ConditionPlugin
from application.conditions.registry import ConditionPluginRegistry
from application.conditions.token_matcher import TokenMatcherCondition
from application.ports.logger import NullLogger
from application.services.condition_deps import ConditionDeps
from application.services.token_replacer import TokenReplacer
from domain.exceptions import PluginNotFoundError
from domain.form import FormElement
from infrastructure.entity.in_memory_entity_type_registry import InMemoryEntityTypeRegistry
from infrastructure.modules.static_module_handler import StaticModuleHandler
from infrastructure.request.request_stack import RequestStack


class AlwaysCondition(ConditionPlugin):
    plugin_id = "always"

    def evaluate(self) -> bool:
        return True

    def summary(self) -> str:
        return "always"

    def form_elements(self):
        return [FormElement(name="note", type="markup")]


def _deps() -> ConditionDeps:
    return ConditionDeps(
        token_service=TokenReplacer(),
        entity_type_registry=InMemoryEntityTypeRegistry.default(),
        request_stack=RequestStack(),
        module_handler=StaticModuleHandler(),
        logger=NullLogger(),
    )


class TestConditionPluginRegistry:
    def test_default_registers_token_matcher(self):
        registry = ConditionPluginRegistry.default()
        assert registry.plugin_ids() == ["token_matcher"]
        assert registry.has("token_matcher")

    def test_create_token_matcher_instance(self):
        registry = ConditionPluginRegistry.default()
        plugin = registry.create_instance("token_matcher", {"token_match": "[node:title]"}, _deps())
        assert isinstance(plugin, TokenMatcherCondition)
        assert plugin.get_configuration()["token_match"] == "[node:title]"

    def test_unknown_plugin_raises(self):
        registry = ConditionPluginRegistry.default()
        with pytest.raises(PluginNotFoundError, match="No condition plugin found: missing"):
            registry.create_instance("missing", {}, _deps())

    def test_register_custom_plugin(self):
        registry = ConditionPluginRegistry({})
        registry.register("always", lambda configuration, deps: AlwaysCondition(configuration))

        plugin = registry.create_instance("always", {"negate": True}, _deps())

        assert plugin.evaluate() is True
        assert plugin.execute() is False
        assert plugin.build_configuration_form().names() == ["note", "negate"]
