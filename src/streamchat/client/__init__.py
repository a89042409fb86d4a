"""Chat client: transcript state and the relay read loop."""

from .models import Message, Role, Transcript
from .session import FAILURE_MESSAGE, ChatSession, RelayError

__all__ = ["ChatSession", "FAILURE_MESSAGE", "Message", "RelayError", "Role", "Transcript"]
