# infrastructure/request/request_stack.py
from __future__ import annotations

from typing import List, Optional

from application.ports.request_stack import RequestStackPort
from domain.request import Request


class RequestStack(RequestStackPort):
    """Stack of in-flight requests; sub-requests are pushed on top."""

    def __init__(self) -> None:
        self._requests: List[Request] = []

    def push(self, request: Request) -> None:
        self._requests.append(request)

    def pop(self) -> Optional[Request]:
        if not self._requests:
            return None
        return self._requests.pop()

    def get_current_request(self) -> Optional[Request]:
        if not self._requests:
            return None
        return self._requests[-1]

    def get_main_request(self) -> Optional[Request]:
        if not self._requests:
            return None
        return self._requests[0]
