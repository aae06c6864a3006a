# infrastructure/entity/entity_factory.py
from __future__ import annotations

from typing import Any, Dict, Optional

from domain.entity import Entity, EntityKind
from domain.request import ParameterBag, Request


def entity_from_dict(data: Dict[str, Any]) -> Entity:
    """
    {"entity_type": "node", "id": 1, "bundle": "article", "label": "Hello",
     "values": {"title": "Hello", "uid": {"entity_type": "user", ...}}}
    """
    entity_type = data.get("entity_type")
    if not entity_type:
        raise ValueError("entity_type is required")

    values = {name: _convert_value(v) for name, v in (data.get("values") or {}).items()}
    return Entity(
        entity_type_id=str(entity_type),
        id=data.get("id"),
        bundle=data.get("bundle") or "",
        label=data.get("label") or "",
        values=values,
        kind=EntityKind(data.get("kind") or EntityKind.CONTENT.value),
    )


def _convert_value(value: Any) -> Any:
    # nested entity references
    if isinstance(value, dict) and "entity_type" in value:
        return entity_from_dict(value)
    if isinstance(value, list):
        return [_convert_value(v) for v in value]
    return value


def build_request(
    entities: Optional[Dict[str, Dict[str, Any]]] = None,
    attributes: Optional[Dict[str, Any]] = None,
    path: str = "/",
) -> Request:
    bag = ParameterBag(attributes)
    for key, data in (entities or {}).items():
        bag.set(key, entity_from_dict(data))
    return Request(path=path, attributes=bag)
