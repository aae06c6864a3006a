from __future__ import annotations

from typing import Dict, Optional


class ConditionError(Exception):
    pass


class ValidationError(ConditionError):
    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors: Dict[str, str] = dict(errors or {})


class InvalidPatternError(ConditionError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid regex pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class PluginNotFoundError(ConditionError):
    pass


class ConditionNotFoundError(ConditionError):
    pass
