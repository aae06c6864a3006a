from infrastructure.loading.base_loader import DataLoaderBase, LoadError
from infrastructure.loading.json_loader import JsonDataLoader
from infrastructure.loading.yaml_loader import YamlDataLoader
from infrastructure.loading.loader_registry import DataLoaderRegistry

__all__ = [
    "DataLoaderBase",
    "LoadError",
    "JsonDataLoader",
    "YamlDataLoader",
    "DataLoaderRegistry",
]
