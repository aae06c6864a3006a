# infrastructure/loading/base_loader.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union


class LoadError(Exception):
    pass


class DataLoaderBase(ABC):
    def load_from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        p = Path(path)
        if not p.exists():
            raise LoadError(f"File not found: {path}")

        data = self._load_file(p)
        if data is None:
            raise LoadError(f"File is empty: {path}")
        if not isinstance(data, dict):
            raise LoadError(f"File is invalid (expected mapping): {path}")
        return data

    def dump_to_file(self, path: Union[str, Path], data: Dict[str, Any]) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        self._dump_file(p, data)

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...

    @abstractmethod
    def _dump_file(self, path: Path, data: Dict[str, Any]) -> None:
        ...
