"""Transcript data structures.

Messages and transcripts are immutable values. Updating the conversation
always produces a new Transcript; an existing Message is never changed.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class Message:
    """A chat message in the conversation."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def with_content(self, content: str) -> "Message":
        """Return a copy of this message with different content."""
        return replace(self, content=content)


@dataclass(frozen=True)
class Transcript:
    """Ordered, append-only conversation history."""

    messages: tuple[Message, ...] = ()

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def __getitem__(self, index: int) -> Message:
        return self.messages[index]

    @property
    def last(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def append(self, message: Message) -> "Transcript":
        return Transcript(self.messages + (message,))

    def replace_last(self, message: Message) -> "Transcript":
        """Return a transcript whose final entry is `message`."""
        if not self.messages:
            raise IndexError("replace_last on empty transcript")
        return Transcript(self.messages[:-1] + (message,))

    def last_response(self) -> str | None:
        """Content of the most recent assistant message."""
        for msg in reversed(self.messages):
            if msg.role == "assistant":
                return msg.content
        return None
