"""Fake Gemini client objects shared by the tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest


def web_chunk(uri: Optional[str], title: Optional[str] = None) -> SimpleNamespace:
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))


def fake_response(text: Optional[str], chunks: Optional[List[Any]] = None) -> SimpleNamespace:
    metadata = SimpleNamespace(grounding_chunks=chunks)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


class FakeModels:
    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeAsyncClient:
    def __init__(self, models: FakeModels) -> None:
        self.models = models
        self.closed = 0

    async def aclose(self) -> None:
        self.closed += 1


class FakeClientFactory:
    """Stands in for `genai.Client`; counts constructions, calls and closes."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.models = FakeModels(response=response, error=error)
        self.api_keys: List[str] = []
        self.clients: List[FakeAsyncClient] = []

    def __call__(self, *, api_key: str) -> SimpleNamespace:
        self.api_keys.append(api_key)
        aio = FakeAsyncClient(self.models)
        self.clients.append(aio)
        return SimpleNamespace(aio=aio)

    @property
    def closed_clients(self) -> int:
        return sum(1 for client in self.clients if client.closed)

    @property
    def network_calls(self) -> int:
        return len(self.models.calls)


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("DOSSIER_MODEL_NAME", raising=False)
