# infrastructure/loading/yaml_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from infrastructure.loading.base_loader import DataLoaderBase


class YamlDataLoader(DataLoaderBase):
    def _load_file(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    def _dump_file(self, path: Path, data: Dict[str, Any]) -> None:
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
