# infrastructure/entity/in_memory_entity_type_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from application.ports.entity_type_registry import EntityTypeRegistryPort
from domain.entity import EntityKind, EntityTypeDefinition
from infrastructure.loading.base_loader import LoadError
from infrastructure.loading.loader_registry import DataLoaderRegistry

DEFAULT_ENTITY_TYPES: List[EntityTypeDefinition] = [
    EntityTypeDefinition(id="node", kind=EntityKind.CONTENT, label="Content"),
    EntityTypeDefinition(id="user", kind=EntityKind.CONTENT, label="User"),
    EntityTypeDefinition(id="comment", kind=EntityKind.CONTENT, label="Comment"),
    EntityTypeDefinition(id="taxonomy_term", kind=EntityKind.CONTENT, label="Taxonomy term", token_type="term"),
    EntityTypeDefinition(id="taxonomy_vocabulary", kind=EntityKind.CONFIG, label="Taxonomy vocabulary", token_type="vocabulary"),
    EntityTypeDefinition(id="block", kind=EntityKind.CONFIG, label="Block"),
]


class InMemoryEntityTypeRegistry(EntityTypeRegistryPort):
    def __init__(self, definitions: Iterable[EntityTypeDefinition]):
        self._definitions: Dict[str, EntityTypeDefinition] = {d.id: d for d in definitions}

    def get_definitions(self) -> Dict[str, EntityTypeDefinition]:
        return dict(self._definitions)

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        definition = self._definitions.get(entity_type_id)
        if definition is None:
            raise KeyError(f"Unknown entity type: {entity_type_id}")
        return definition

    @classmethod
    def default(cls) -> "InMemoryEntityTypeRegistry":
        return cls(DEFAULT_ENTITY_TYPES)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryEntityTypeRegistry":
        """
        entity_types:
          node: {kind: content, label: Content}
          taxonomy_term: {kind: content, token_type: term}
        """
        loader = DataLoaderRegistry().get_loader(Path(path))
        data = loader.load_from_file(path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryEntityTypeRegistry":
        items = data.get("entity_types", {})
        if not isinstance(items, dict):
            raise LoadError("entity_types must be a mapping")

        definitions: List[EntityTypeDefinition] = []
        for entity_type_id, info in items.items():
            info = info or {}
            kind = str(info.get("kind", EntityKind.CONTENT.value)).lower()
            try:
                entity_kind = EntityKind(kind)
            except ValueError:
                raise LoadError(f"Unknown entity kind for {entity_type_id}: {kind}")
            definitions.append(
                EntityTypeDefinition(
                    id=str(entity_type_id),
                    kind=entity_kind,
                    label=info.get("label", ""),
                    token_type=info.get("token_type"),
                )
            )
        return cls(definitions)
