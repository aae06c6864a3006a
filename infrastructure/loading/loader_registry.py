# infrastructure/loading/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict

from infrastructure.loading.base_loader import DataLoaderBase, LoadError
from infrastructure.loading.json_loader import JsonDataLoader
from infrastructure.loading.yaml_loader import YamlDataLoader


class DataLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, DataLoaderBase] = {
            ".yaml": YamlDataLoader(),
            ".yml": YamlDataLoader(),
            ".json": JsonDataLoader(),
        }

    def get_loader(self, path: Path) -> DataLoaderBase:
        ext = Path(path).suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise LoadError(f"Unsupported file format: {ext}")
        return loader
