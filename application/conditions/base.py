# application/conditions/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from domain.condition import to_bool
from domain.form import FormElement, FormSchema


class ConditionPlugin(ABC):
    """
    A configurable boolean predicate evaluated by the host.

    Subclasses provide evaluate(), summary(), default_configuration() and
    their own form elements; negation is handled here.
    """

    plugin_id: str = ""
    label: str = ""

    def __init__(self, configuration: Dict[str, Any]):
        merged = self.default_configuration()
        merged.update(configuration or {})
        self.configuration: Dict[str, Any] = merged

    @abstractmethod
    def evaluate(self) -> bool: ...

    @abstractmethod
    def summary(self) -> str: ...

    def default_configuration(self) -> Dict[str, Any]:
        return {"negate": False}

    def is_negated(self) -> bool:
        return to_bool(self.configuration.get("negate", False))

    def execute(self) -> bool:
        return self.evaluate() != self.is_negated()

    def build_configuration_form(self) -> FormSchema:
        elements = self.form_elements()
        elements.append(
            FormElement(
                name="negate",
                type="checkbox",
                title="Negate the condition",
                default_value=self.is_negated(),
            )
        )
        return FormSchema(plugin_id=self.plugin_id, elements=elements)

    @abstractmethod
    def form_elements(self) -> List[FormElement]: ...

    def validate_configuration_form(self, values: Dict[str, Any]) -> None:
        return None

    def submit_configuration_form(self, values: Dict[str, Any]) -> None:
        self.configuration["negate"] = to_bool(values.get("negate", False))

    def get_configuration(self) -> Dict[str, Any]:
        return dict(self.configuration)
