"""
Condition domain model
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict

_TRUE_STRINGS = ("1", "true", "yes", "on")


def to_bool(value: Any) -> bool:
    """
    Coerce form/YAML flag values: 0/1, "0"/"1", "true"/"false", None.
    """
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def to_text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class TokenMatcherConfig:
    token_match: str = ""
    value_match: str = ""
    check_empty: bool = False
    use_regex: bool = False
    negate: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenMatcherConfig":
        return cls(
            token_match=to_text(data.get("token_match", "")),
            value_match=to_text(data.get("value_match", "")),
            check_empty=to_bool(data.get("check_empty", False)),
            use_regex=to_bool(data.get("use_regex", False)),
            negate=to_bool(data.get("negate", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ConditionRecord:
    """
    Host-owned record a condition plugin configuration lives in.
    """
    id: str
    plugin_id: str
    configuration: Dict[str, Any] = field(default_factory=dict)
    label: str = ""

    def with_configuration(self, configuration: Dict[str, Any]) -> "ConditionRecord":
        return ConditionRecord(
            id=self.id,
            plugin_id=self.plugin_id,
            configuration=dict(configuration),
            label=self.label,
        )
