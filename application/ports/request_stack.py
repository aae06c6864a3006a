# application/ports/request_stack.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from domain.request import Request


class RequestStackPort(ABC):
    @abstractmethod
    def get_current_request(self) -> Optional[Request]:
        ...
