from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from domain.condition import ConditionRecord


class ConditionStorePort(ABC):
    @abstractmethod
    def get(self, condition_id: str) -> Optional[ConditionRecord]:
        ...

    @abstractmethod
    def save(self, record: ConditionRecord) -> None:
        ...

    @abstractmethod
    def list(self) -> List[ConditionRecord]:
        ...
