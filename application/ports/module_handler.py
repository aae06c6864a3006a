# application/ports/module_handler.py
from __future__ import annotations

from abc import ABC, abstractmethod


class ModuleHandlerPort(ABC):
    @abstractmethod
    def module_exists(self, name: str) -> bool:
        ...
