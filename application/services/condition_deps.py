# application/services/condition_deps.py
from __future__ import annotations

from dataclasses import dataclass, replace

from application.ports.entity_type_registry import EntityTypeRegistryPort
from application.ports.logger import LoggerPort
from application.ports.module_handler import ModuleHandlerPort
from application.ports.request_stack import RequestStackPort
from application.ports.token_service import TokenServicePort


@dataclass(frozen=True)
class ConditionDeps:
    """Host services handed to condition plugins."""
    token_service: TokenServicePort
    entity_type_registry: EntityTypeRegistryPort
    request_stack: RequestStackPort
    module_handler: ModuleHandlerPort
    logger: LoggerPort

    def with_logger(self, logger: LoggerPort) -> "ConditionDeps":
        return replace(self, logger=logger)

    def with_request_stack(self, request_stack: RequestStackPort) -> "ConditionDeps":
        return replace(self, request_stack=request_stack)
