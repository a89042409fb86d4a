"""Unit tests for the upstream provider module."""
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from streamchat.config import Settings, get_llm, load_settings
from streamchat.llm import ChatMessage, LLMProvider, OpenAIProvider, create_llm_provider


def _chunk(content=None, usage=None):
    choices = [] if content is None else [SimpleNamespace(delta=SimpleNamespace(content=content))]
    return SimpleNamespace(choices=choices, usage=usage)


class FakeCompletions:
    """Stands in for client.chat.completions, recording create() params."""

    def __init__(self, chunks):
        self._chunks = chunks
        self.params = None

    async def create(self, **params):
        self.params = params

        async def _stream():
            for chunk in self._chunks:
                yield chunk

        return _stream()


class TestProviderInterface:
    """Tests for the abstract LLMProvider interface."""

    def test_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore

    def test_chat_message_rejects_unknown_role(self):
        """Test that ChatMessage validates roles."""
        with pytest.raises(ValidationError):
            ChatMessage(role="robot", content="beep")  # type: ignore[arg-type]


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    def test_default_model(self):
        """Test the default model identifier."""
        provider = OpenAIProvider(api_key="fake-key")
        assert provider.model == "gpt-4.1-nano"

    @pytest.mark.asyncio
    async def test_stream_yields_text_deltas_and_usage(self):
        """Test delta extraction and usage capture from stream chunks."""
        provider = OpenAIProvider(api_key="fake-key", model="test-model")
        completions = FakeCompletions([
            _chunk("Hel"),
            _chunk(""),
            _chunk(None),
            _chunk("lo"),
            _chunk(usage=SimpleNamespace(prompt_tokens=3, completion_tokens=2, total_tokens=5)),
        ])
        provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

        stream = await provider.chat_completion_stream([ChatMessage(role="user", content="hi")])
        assert completions.params is None  # lazy until iterated

        deltas = [delta async for delta in stream]

        assert deltas == ["Hel", "lo"]
        assert stream.usage == {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5}
        assert completions.params["model"] == "test-model"
        assert completions.params["stream"] is True
        assert completions.params["messages"] == [{"role": "user", "content": "hi"}]

    @pytest.mark.asyncio
    async def test_concurrent_streams_keep_their_own_usage(self):
        """Test that usage lands on the stream that produced it."""
        provider = OpenAIProvider(api_key="fake-key")
        usage = SimpleNamespace(prompt_tokens=1, completion_tokens=1, total_tokens=2)
        provider._client = SimpleNamespace(chat=SimpleNamespace(
            completions=FakeCompletions([_chunk("x"), _chunk(usage=usage)])
        ))

        first = await provider.chat_completion_stream([ChatMessage(role="user", content="a")])
        second = await provider.chat_completion_stream([ChatMessage(role="user", content="b")])
        [_ async for _ in first]

        assert first.usage == {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2}
        assert second.usage is None

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_stream_real_api(self, api_keys):
        """Integration test: stream a short completion from the real API."""
        if not api_keys["openai"]:
            pytest.skip("OPENAI_API_KEY not set")

        async with OpenAIProvider(api_key=api_keys["openai"]) as provider:
            stream = await provider.chat_completion_stream(
                [ChatMessage(role="user", content="Say hello in one word.")]
            )
            text = "".join([delta async for delta in stream])

        assert text.strip()


class TestFactory:
    """Tests for the provider factory and configuration helpers."""

    def test_create_openai_provider(self):
        """Test creating OpenAI provider via factory."""
        provider = create_llm_provider("OpenAI", api_key="test-key", model="m")
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "m"

    def test_create_provider_unknown_type(self):
        """Test that unknown provider type raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("unknown", api_key="test-key")

    def test_create_provider_missing_api_key(self):
        """Test that missing API key raises TypeError."""
        with pytest.raises(TypeError, match="requires 'api_key'"):
            create_llm_provider("openai")

    def test_load_settings_from_env(self, monkeypatch):
        """Test that settings come from environment variables."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("OPENAI_CHAT_MODEL", "other-model")
        monkeypatch.setenv("STREAMCHAT_PORT", "9123")

        settings = load_settings()

        assert settings.openai_api_key == "sk-test"
        assert settings.openai_model == "other-model"
        assert settings.port == 9123
        assert "sk-test" not in repr(settings)

    def test_get_llm_without_key_returns_none(self, caplog):
        """Test that a missing credential yields no provider and a warning."""
        assert get_llm(Settings(openai_api_key=None)) is None
        assert "OPENAI_API_KEY not set" in caplog.text

    def test_get_llm_with_key(self):
        """Test that a credential yields an OpenAI provider with the model."""
        llm = get_llm(Settings(openai_api_key="sk-test", openai_model="gpt-4.1-nano"))
        assert isinstance(llm, OpenAIProvider)
        assert llm.model == "gpt-4.1-nano"
