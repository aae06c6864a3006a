# application/ports/entity_type_registry.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

from domain.entity import EntityTypeDefinition


class EntityTypeRegistryPort(ABC):
    @abstractmethod
    def get_definitions(self) -> Dict[str, EntityTypeDefinition]:
        ...
