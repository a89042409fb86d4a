"""
streamchat: a minimal streaming chat relay and client.

A FastAPI relay forwards a prompt to an upstream completion service and
streams the text back as it is generated; the client folds the stream into
an immutable transcript and renders it in a Textual TUI.
"""

__version__ = "0.1.0"

from .client import ChatSession, Message, Transcript
from .llm import ChatMessage, LLMProvider, create_llm_provider
from .relay import create_app

__all__ = [
    "ChatMessage",
    "ChatSession",
    "LLMProvider",
    "Message",
    "Transcript",
    "create_app",
    "create_llm_provider",
]
