# infrastructure/conditions/file_condition_store.py
"""
YAML/JSON ファイルに条件レコードを保存するストア

conditions:
  front_page_title:
    plugin: token_matcher
    label: Front page title
    configuration:
      token_match: "[node:title]"
      value_match: Hello
"""
from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional, Union

from application.ports.condition_store import ConditionStorePort
from domain.condition import ConditionRecord
from infrastructure.loading.base_loader import DataLoaderBase, LoadError
from infrastructure.loading.loader_registry import DataLoaderRegistry


class FileConditionStore(ConditionStorePort):
    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._loader: DataLoaderBase = DataLoaderRegistry().get_loader(self._path)
        self._lock = Lock()

    def get(self, condition_id: str) -> Optional[ConditionRecord]:
        with self._lock:
            return self._read().get(condition_id)

    def save(self, record: ConditionRecord) -> None:
        with self._lock:
            records = self._read()
            records[record.id] = record
            self._write(records)

    def list(self) -> List[ConditionRecord]:
        with self._lock:
            records = self._read()
            return [records[k] for k in sorted(records)]

    def _read(self) -> Dict[str, ConditionRecord]:
        # missing store file is treated as "no conditions yet"
        if not self._path.exists():
            return {}

        data = self._loader.load_from_file(self._path)
        items = data.get("conditions") or {}
        if not isinstance(items, dict):
            raise LoadError(f"conditions must be a mapping: {self._path}")

        records: Dict[str, ConditionRecord] = {}
        for condition_id, item in items.items():
            records[str(condition_id)] = self._to_record(str(condition_id), item or {})
        return records

    def _to_record(self, condition_id: str, item: Dict[str, Any]) -> ConditionRecord:
        plugin_id = item.get("plugin")
        if not plugin_id:
            raise LoadError(f"Condition '{condition_id}' has no plugin")
        return ConditionRecord(
            id=condition_id,
            plugin_id=plugin_id,
            configuration=dict(item.get("configuration") or {}),
            label=item.get("label", ""),
        )

    def _write(self, records: Dict[str, ConditionRecord]) -> None:
        payload: Dict[str, Any] = {"conditions": {}}
        for condition_id in sorted(records):
            record = records[condition_id]
            payload["conditions"][condition_id] = {
                "plugin": record.plugin_id,
                "label": record.label,
                "configuration": dict(record.configuration),
            }
        self._loader.dump_to_file(self._path, payload)
