"""Scripted FactorialHR API for tests."""

from typing import Any, Dict, List, Tuple, Union

import httpx

BASE_URL = "https://api.factorialhr.test"

Scripted = Union[httpx.Response, Exception]


def json_response(data: Any, status_code: int = 200, headers: Dict[str, str] = None) -> httpx.Response:
    return httpx.Response(status_code, json=data, headers=headers)


def error_response(status_code: int, body: Any = None, headers: Dict[str, str] = None) -> httpx.Response:
    if body is None:
        return httpx.Response(status_code, headers=headers)
    if isinstance(body, str):
        return httpx.Response(status_code, text=body, headers=headers)
    return httpx.Response(status_code, json=body, headers=headers)


class MockFactorialAPI:
    """
    Serves queued responses per (method, path).

    Each call pops the next scripted item; the last one is repeated once the
    queue runs down. Exceptions in the queue are raised from the transport.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Scripted]] = {}

    def add(self, method: str, path: str, *responses: Scripted) -> "MockFactorialAPI":
        self._routes.setdefault((method.upper(), path), []).extend(responses)
        return self

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return error_response(404, {"message": f"No route for {request.method} {request.url.path}"})

        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def calls(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests
            if r.method == method.upper() and r.url.path == path
        )

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]
