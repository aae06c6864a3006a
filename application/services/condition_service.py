# application/services/condition_service.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from application.conditions.base import ConditionPlugin
from application.conditions.registry import ConditionPluginRegistry
from application.ports.condition_store import ConditionStorePort
from application.services.condition_deps import ConditionDeps
from domain.condition import ConditionRecord
from domain.exceptions import ConditionNotFoundError
from domain.form import FormSchema


@dataclass(frozen=True)
class EvaluationResult:
    condition_id: str
    result: bool
    summary: str


class ConditionService:
    """
    Host-side flow around condition records:
    load record -> create plugin -> evaluate / build form / validate + save.
    """

    def __init__(self, store: ConditionStorePort, registry: ConditionPluginRegistry):
        self._store = store
        self._registry = registry

    def get(self, condition_id: str) -> ConditionRecord:
        record = self._store.get(condition_id)
        if record is None:
            raise ConditionNotFoundError(f"Condition not found: {condition_id}")
        return record

    def create_plugin(self, record: ConditionRecord, deps: ConditionDeps) -> ConditionPlugin:
        return self._registry.create_instance(record.plugin_id, record.configuration, deps)

    def evaluate(self, condition_id: str, deps: ConditionDeps) -> EvaluationResult:
        record = self.get(condition_id)
        logger = deps.logger.bind(condition_id=condition_id, plugin_id=record.plugin_id)
        plugin = self.create_plugin(record, deps.with_logger(logger))

        result = plugin.execute()
        summary = plugin.summary()
        logger.info("condition.evaluated", result=result, summary=summary)
        return EvaluationResult(condition_id=condition_id, result=result, summary=summary)

    def build_form(
        self, plugin_id: str, deps: ConditionDeps, condition_id: Optional[str] = None
    ) -> FormSchema:
        configuration: Dict[str, Any] = {}
        if condition_id:
            record = self.get(condition_id)
            plugin_id = record.plugin_id
            configuration = record.configuration
        plugin = self._registry.create_instance(plugin_id, configuration, deps)
        return plugin.build_configuration_form()

    def save_configuration(
        self,
        condition_id: str,
        values: Dict[str, Any],
        deps: ConditionDeps,
        plugin_id: Optional[str] = None,
    ) -> ConditionRecord:
        record = self._store.get(condition_id)
        if record is None:
            if not plugin_id:
                raise ConditionNotFoundError(f"Condition not found: {condition_id}")
            record = ConditionRecord(id=condition_id, plugin_id=plugin_id)

        plugin = self.create_plugin(record, deps)
        plugin.validate_configuration_form(values)
        plugin.submit_configuration_form(values)

        updated = record.with_configuration(plugin.get_configuration())
        self._store.save(updated)
        deps.logger.info(
            "condition.saved",
            condition_id=condition_id,
            plugin_id=record.plugin_id,
            summary=plugin.summary(),
        )
        return updated
