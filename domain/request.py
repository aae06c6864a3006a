# domain/request.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class ParameterBag:
    """Request-scoped key/value attributes."""

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        self._parameters: Dict[str, Any] = dict(parameters or {})

    def has(self, key: str) -> bool:
        return key in self._parameters

    def get(self, key: str, default: Any = None) -> Any:
        return self._parameters.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._parameters[key] = value

    def remove(self, key: str) -> None:
        self._parameters.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._parameters.keys())

    def all(self) -> Dict[str, Any]:
        return dict(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)


@dataclass
class Request:
    path: str = "/"
    attributes: ParameterBag = field(default_factory=ParameterBag)
