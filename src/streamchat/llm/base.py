from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for upstream completion providers.

    This module hides the design decision of which completion service the
    relay talks to. Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Extracting text deltas from the provider's stream events

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            stream = await provider.chat_completion_stream(messages)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model identifier used when none is given."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        The returned stream is lazy: no network call is made until the first
        delta is requested. It is finite and cannot be restarted.

        Args:
            messages: Conversation to complete
            model: Model to use (None uses provider's default)
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse that yields non-empty text deltas and captures
            usage info. After iteration, access usage via stream.usage

        Raises:
            Exception: Provider-specific errors, raised from iteration
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
