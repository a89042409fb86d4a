"""Chat session state and the streaming read loop.

Hides how a prompt travels to the relay and how the raw byte stream that
comes back is decoded and folded into the transcript.
"""

import codecs
import logging
from collections.abc import Callable

import httpx

from ..config import RELAY_PATH
from .models import Message, Transcript

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Something went wrong."


class RelayError(Exception):
    """The relay answered with a non-success status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Relay request failed with status {status_code}")
        self.status_code = status_code


class ChatSession:
    """State for one chat session: input buffer, transcript and busy flag.

    Only one submission can be in flight at a time. Every change to the
    transcript or the busy flag is followed by a call to `on_change`, which
    is where a UI re-renders.

    Example:
        async with httpx.AsyncClient(base_url="http://127.0.0.1:8000") as http:
            session = ChatSession(http, on_change=lambda s: print(s.transcript.last))
            await session.ask("Hello!")
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        endpoint: str = RELAY_PATH,
        on_change: Callable[["ChatSession"], None] | None = None,
    ) -> None:
        self._http = http
        self._endpoint = endpoint
        self._on_change = on_change
        self.input = ""
        self.transcript = Transcript()
        self.busy = False

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    def _fold(self, text: str) -> None:
        """Replace the open assistant message with one that includes `text`."""
        last = self.transcript.last
        self.transcript = self.transcript.replace_last(
            Message(role="assistant", content=last.content + text)
        )
        self._notify()

    def _fail(self) -> None:
        last = self.transcript.last
        if last is not None and last.role == "assistant" and last.content == "":
            self.transcript = self.transcript.replace_last(last.with_content(FAILURE_MESSAGE))
        else:
            self.transcript = self.transcript.append(
                Message(role="assistant", content=FAILURE_MESSAGE)
            )

    async def submit(self) -> None:
        """Send the current input to the relay and stream the answer in.

        No-op when the trimmed input is empty or a submission is in flight.
        Never raises for transport failures; they end up as a failure
        message in the transcript.
        """
        prompt = self.input.strip()
        if not prompt or self.busy:
            return

        self.input = ""
        self.transcript = self.transcript.append(Message(role="user", content=prompt))
        self.busy = True
        self.transcript = self.transcript.append(Message(role="assistant", content=""))
        self._notify()

        try:
            async with self._http.stream(
                "POST", self._endpoint, json={"query": prompt}
            ) as response:
                if not response.is_success:
                    raise RelayError(response.status_code)

                decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
                async for chunk in response.aiter_bytes():
                    text = decoder.decode(chunk)
                    if text:
                        self._fold(text)
                tail = decoder.decode(b"", final=True)
                if tail:
                    self._fold(tail)
        except Exception as e:
            logger.warning("Chat request failed: %s", e)
            self._fail()
        finally:
            self.busy = False
            self._notify()

    async def ask(self, prompt: str) -> None:
        """Set the input buffer to `prompt` and submit it."""
        self.input = prompt
        await self.submit()
