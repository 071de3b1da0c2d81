"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from memory_box.client import MemoryBoxClient
from memory_box.config import Settings
from memory_box.tools import create_registry
from memory_box.tools.registry import ToolRegistry

API_URL = "https://api.example.com"


class FakeMemoryBoxAPI:
    """In-memory stand-in for the Memory Box API, served via httpx.MockTransport.

    Register canned responses with ``route``; every request received is kept
    in ``requests`` for assertions.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], httpx.Response | Exception] = {}

    def route(
        self,
        method: str,
        path: str,
        json: Any = None,
        status_code: int = 200,
    ) -> None:
        self._routes[(method, path)] = httpx.Response(status_code, json=json)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self._routes[(method, path)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._routes.get((request.method, request.url.path))
        if outcome is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last.content)


@pytest.fixture
def api() -> FakeMemoryBoxAPI:
    return FakeMemoryBoxAPI()


@pytest.fixture
def settings() -> Settings:
    return Settings(memory_box_token="test-token", memory_box_api_url=API_URL)


@pytest.fixture
def client(api: FakeMemoryBoxAPI) -> MemoryBoxClient:
    return MemoryBoxClient(
        base_url=API_URL,
        token="test-token",
        default_bucket="General",
        transport=httpx.MockTransport(api.handler),
    )


@pytest.fixture
def registry(settings: Settings, client: MemoryBoxClient) -> ToolRegistry:
    return create_registry(settings, client=client)
