# application/ports/token_service.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class TokenServicePort(ABC):
    @abstractmethod
    def replace(self, text: str, data: Dict[str, Any], clear: bool = False) -> str:
        """
        Replace [type:name] tokens in text using data keyed by token type.
        With clear=True, tokens that cannot be resolved are removed.
        """
        ...
