# domain/entity.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class EntityKind(str, Enum):
    CONTENT = "content"
    CONFIG = "config"


@dataclass(frozen=True)
class EntityTypeDefinition:
    id: str
    kind: EntityKind = EntityKind.CONTENT
    label: str = ""
    token_type: Optional[str] = None  # None => id

    def is_content_entity_type(self) -> bool:
        return self.kind == EntityKind.CONTENT

    def get_token_type(self) -> str:
        return self.token_type or self.id


@dataclass(frozen=True)
class Entity:
    """
    Contextual entity carried on a request.

    Token properties resolve through get():
      id / bundle (alias: type) / label, then values[name].
    """
    entity_type_id: str
    id: Any = None
    bundle: str = ""
    label: str = ""
    values: Dict[str, Any] = field(default_factory=dict)
    kind: EntityKind = EntityKind.CONTENT

    def is_content_entity(self) -> bool:
        return self.kind == EntityKind.CONTENT

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        if name == "id":
            return self.id
        if name in ("bundle", "type"):
            return self.bundle
        if name == "label":
            return self.label
        return None

    def has(self, name: str) -> bool:
        return name in self.values or name in ("id", "bundle", "type", "label")
