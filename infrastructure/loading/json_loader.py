# infrastructure/loading/json_loader.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from infrastructure.loading.base_loader import DataLoaderBase


class JsonDataLoader(DataLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def _dump_file(self, path: Path, data: Dict[str, Any]) -> None:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=2)
