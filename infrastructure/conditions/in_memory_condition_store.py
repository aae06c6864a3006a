from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, List, Optional

from application.ports.condition_store import ConditionStorePort
from domain.condition import ConditionRecord


class InMemoryConditionStore(ConditionStorePort):
    def __init__(self, records: Optional[Iterable[ConditionRecord]] = None) -> None:
        self._records: Dict[str, ConditionRecord] = {r.id: r for r in (records or [])}
        self._lock = Lock()

    def get(self, condition_id: str) -> Optional[ConditionRecord]:
        with self._lock:
            return self._records.get(condition_id)

    def save(self, record: ConditionRecord) -> None:
        with self._lock:
            self._records[record.id] = record

    def list(self) -> List[ConditionRecord]:
        with self._lock:
            return [self._records[k] for k in sorted(self._records)]
