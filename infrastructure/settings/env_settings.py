# infrastructure/settings/env_settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Optional

from dotenv import dotenv_values

# .envファイル（プロジェクトルート）
_env_path = Path(__file__).parent.parent.parent / ".env"

PREFIX = "TOKEN_CONDITIONS_"


@dataclass(frozen=True)
class Settings:
    store_path: Path = Path("conditions.yaml")
    entity_types_path: Optional[Path] = None
    modules: FrozenSet[str] = field(default_factory=lambda: frozenset({"token"}))
    log_level: str = "INFO"
    log_format: str = "json"  # "json" | "loguru" | "both"
    site_name: str = "Token Conditions"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "Settings":
        def _get(name: str) -> Optional[str]:
            value = values.get(PREFIX + name)
            return value if value not in (None, "") else None

        modules = _get("MODULES")
        entity_types = _get("ENTITY_TYPES")
        return cls(
            store_path=Path(_get("STORE") or "conditions.yaml"),
            entity_types_path=Path(entity_types) if entity_types else None,
            modules=(
                frozenset(m.strip() for m in modules.split(",") if m.strip())
                if modules is not None
                else frozenset({"token"})
            ),
            log_level=(_get("LOG_LEVEL") or "INFO").upper(),
            log_format=(_get("LOG_FORMAT") or "json").lower(),
            site_name=_get("SITE_NAME") or "Token Conditions",
        )


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    .env と環境変数から設定を読み込む（.envファイルの値を優先）
    """
    path = env_path or _env_path
    values: Dict[str, Optional[str]] = dict(dotenv_values(path)) if path.exists() else {}
    for key, value in os.environ.items():
        if key.startswith(PREFIX) and key not in values:
            values[key] = value
    return Settings.from_mapping(values)
