# domain/emptiness.py
from __future__ import annotations

from typing import Any


def is_empty(value: Any) -> bool:
    """
    Loose emptiness: None, "", "0", 0, 0.0, False and empty containers.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (bool, int, float)):
        return not value
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False
