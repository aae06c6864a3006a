from __future__ import annotations

import re
from typing import Any, Callable, Dict, Mapping, Optional, Union

from application.ports.token_service import TokenServicePort
from domain.entity import Entity

GlobalProvider = Union[Mapping[str, Any], Callable[[], Any]]

TOKEN_PATTERN = re.compile(r"\[([^\s\[\]:]+):([^\[\]]+)\]")


class _Missing:
    pass


_MISSING = _Missing()


class TokenReplacer(TokenServicePort):
    """
    [type:name] / [type:name:chained] トークンを展開する。
    - type は data（コンテキストのエンティティ）→ globals の順に探す
    - チェーン参照対応: [node:author:name]
    - list 添字対応: [node:tags:0]
    - 解決できないトークンは clear=True なら空文字、そうでなければそのまま残す
    """

    def __init__(self, global_providers: Optional[Dict[str, GlobalProvider]] = None):
        self._globals: Dict[str, GlobalProvider] = dict(global_providers or {})

    def global_types(self):
        return sorted(self._globals.keys())

    def scan(self, text: str) -> Dict[str, Dict[str, str]]:
        """
        Group tokens by type: {"node": {"title": "[node:title]"}}
        """
        found: Dict[str, Dict[str, str]] = {}
        if not text:
            return found
        for m in TOKEN_PATTERN.finditer(text):
            found.setdefault(m.group(1), {})[m.group(2)] = m.group(0)
        return found

    def replace(self, text: str, data: Dict[str, Any], clear: bool = False) -> str:
        if text is None:
            return ""
        if "[" not in text:
            return text

        def _sub(m: "re.Match[str]") -> str:
            value = self._resolve(m.group(1), m.group(2), data)
            if value is _MISSING:
                return "" if clear else m.group(0)
            return self._render(value)

        return TOKEN_PATTERN.sub(_sub, text)

    def _resolve(self, token_type: str, name: str, data: Dict[str, Any]) -> Any:
        if token_type in data:
            root = data[token_type]
        elif token_type in self._globals:
            root = self._globals[token_type]
            if callable(root):
                root = root()
        else:
            return _MISSING

        if root is None:
            return _MISSING

        cur = root
        for part in name.split(":"):
            cur = self._resolve_part(cur, part)
            if cur is _MISSING:
                return _MISSING
        return cur

    def _resolve_part(self, cur: Any, part: str) -> Any:
        if cur is None:
            return _MISSING

        if isinstance(cur, Entity):
            if not cur.has(part):
                return _MISSING
            return cur.get(part)

        # list index
        if isinstance(cur, (list, tuple)):
            if not part.isdigit():
                return _MISSING
            idx = int(part)
            if idx >= len(cur):
                return _MISSING
            return cur[idx]

        if isinstance(cur, Mapping):
            return cur.get(part, _MISSING)

        # object attribute access (methods are not token values)
        if part.startswith("_") or not hasattr(cur, part):
            return _MISSING
        value = getattr(cur, part)
        if callable(value):
            return _MISSING
        return value

    def _render(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "1" if value else ""
        if isinstance(value, Entity):
            return value.label
        if isinstance(value, (list, tuple)):
            return ", ".join(self._render(x) for x in value)
        return str(value)
