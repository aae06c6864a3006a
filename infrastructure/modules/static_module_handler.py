from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from application.ports.module_handler import ModuleHandlerPort


@dataclass(frozen=True)
class StaticModuleHandler(ModuleHandlerPort):
    enabled: FrozenSet[str] = field(default_factory=frozenset)

    def module_exists(self, name: str) -> bool:
        return name in self.enabled
