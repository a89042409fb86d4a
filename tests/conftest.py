"""Pytest configuration and shared fixtures."""
import os
from collections.abc import AsyncIterator, Iterable
from typing import Any

import httpx
import pytest

from streamchat.llm import ChatMessage, LLMProvider, StreamingResponse


class FakeProvider(LLMProvider):
    """Upstream stand-in that replays fixed deltas, then optionally fails."""

    def __init__(self, deltas: Iterable[str] = (), error: Exception | None = None) -> None:
        self._deltas = list(deltas)
        self._error = error
        self.calls: list[list[ChatMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.calls.append(list(messages))
        return StreamingResponse(self._generate())

    async def _generate(self) -> AsyncIterator[str]:
        for delta in self._deltas:
            yield delta
        if self._error is not None:
            raise self._error

    async def close(self) -> None:
        self.closed = True


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered in the given raw chunks.

    Optionally waits on `gate` before the first chunk and raises `error`
    after the last one.
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        error: Exception | None = None,
        gate: Any | None = None,
    ) -> None:
        self._chunks = list(chunks)
        self._error = error
        self._gate = gate

    async def __aiter__(self) -> AsyncIterator[bytes]:
        if self._gate is not None:
            await self._gate.wait()
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error


@pytest.fixture
def fake_provider_factory():
    """Return the FakeProvider class for building upstream stand-ins."""
    return FakeProvider


@pytest.fixture
def chunked_stream_factory():
    """Return the ChunkedStream class for building response bodies."""
    return ChunkedStream


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
    }
