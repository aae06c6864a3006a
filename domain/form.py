"""
Configuration form schema handed to the host's form renderer.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from domain.condition import to_bool


@dataclass(frozen=True)
class FieldCondition:
    field: str
    trigger: str  # "empty" | "checked"
    value: bool

    def matches(self, values: Dict[str, Any]) -> bool:
        current = values.get(self.field)
        if self.trigger == "empty":
            return (current is None or str(current) == "") == self.value
        if self.trigger == "checked":
            return to_bool(current) == self.value
        raise ValueError(f"unknown state trigger: {self.trigger}")


@dataclass(frozen=True)
class StateRule:
    """
    action applies when any (combinator="or") or all (combinator="and")
    conditions match the submitted values.
    """
    action: str  # "required" | "invisible"
    conditions: List[FieldCondition]
    combinator: str = "or"

    def applies(self, values: Dict[str, Any]) -> bool:
        results = [c.matches(values) for c in self.conditions]
        if self.combinator == "and":
            return all(results)
        return any(results)


@dataclass(frozen=True)
class FormElement:
    name: str
    type: str
    title: str = ""
    description: str = ""
    default_value: Any = None
    weight: int = 0
    states: List[StateRule] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)

    def state(self, action: str) -> Optional[StateRule]:
        for rule in self.states:
            if rule.action == action:
                return rule
        return None


@dataclass(frozen=True)
class FormSchema:
    plugin_id: str
    elements: List[FormElement] = field(default_factory=list)

    def element(self, name: str) -> Optional[FormElement]:
        for e in self.elements:
            if e.name == name:
                return e
        return None

    def names(self) -> List[str]:
        return [e.name for e in self.elements]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
