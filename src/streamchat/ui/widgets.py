"""Custom Textual widgets for the chat client.

Hides widget implementation details:
- Transcript rendering and incremental bubble updates
- Input bar enable/disable while a reply is streaming
- Log record rendering
"""

import logging
import threading

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Input, RichLog, Static

from ..client import Message, Transcript

TYPING_INDICATOR = "● ● ●"


class MessageBubble(Vertical):
    """One transcript entry: a header line and the message text."""

    def __init__(self, message: Message, *args, typing: bool = False, **kwargs) -> None:
        super().__init__(*args, classes=f"chat-message {message.role}-message", **kwargs)
        self.message = message
        self._header = Static(self._header_text(), classes="message-header")
        self._body = Static(self._body_text(message, typing), classes="message-content")
        self.set_class(typing and not message.content, "typing")

    def compose(self):
        yield self._header
        yield self._body

    def _header_text(self) -> str:
        prefix = "> You" if self.message.role == "user" else "< Assistant"
        return f"{prefix} [{self.message.timestamp:%H:%M:%S}]"

    def show(self, message: Message, typing: bool = False) -> None:
        """Display `message`, or a typing indicator while it is still empty."""
        self.message = message
        self._body.update(self._body_text(message, typing))
        self.set_class(typing and not message.content, "typing")

    @staticmethod
    def _body_text(message: Message, typing: bool) -> Text:
        if typing and not message.content:
            return Text(TYPING_INDICATOR, style="dim")
        return Text(message.content)


class TranscriptView(VerticalScroll):
    """Scrollable chat transcript.

    Transcript entries are immutable, so an entry whose object identity is
    unchanged since the last sync does not need re-rendering. While a reply
    streams only the final bubble changes.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._bubbles: list[MessageBubble] = []

    def sync(self, transcript: Transcript, busy: bool) -> None:
        """Bring the rendered bubbles in line with `transcript`."""
        last_index = len(transcript) - 1
        for index, message in enumerate(transcript):
            typing = busy and index == last_index and message.role == "assistant"
            if index < len(self._bubbles):
                bubble = self._bubbles[index]
                if bubble.message is not message or bubble.has_class("typing") != (typing and not message.content):
                    bubble.show(message, typing=typing)
            else:
                bubble = MessageBubble(message, typing=typing)
                self._bubbles.append(bubble)
                self.mount(bubble)

        if transcript:
            self.border_subtitle = f"{len(transcript)} messages"
        self.scroll_end(animate=False)


class ChatInputBar(Horizontal):
    """Chat input line with Send button. Enter submits."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class Edited(TextualMessage):
        """Message sent when the input text changes."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        yield Input(placeholder="Ask the AI something...", id="chat-input")
        yield Button("Send", id="send-btn", variant="success")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_message(self.Submitted(event.value))

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.post_message(self.Edited(event.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self.post_message(self.Submitted(self.query_one("#chat-input", Input).value))

    def set_value(self, value: str) -> None:
        text_input = self.query_one("#chat-input", Input)
        if text_input.value != value:
            text_input.value = value

    def set_busy(self, busy: bool) -> None:
        """Disable input while a reply is streaming."""
        text_input = self.query_one("#chat-input", Input)
        button = self.query_one("#send-btn", Button)
        text_input.disabled = busy
        button.disabled = busy
        button.label = "..." if busy else "Send"
        if not busy:
            text_input.focus()

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", Input).focus()


class LogPanel(RichLog):
    """Log panel showing records from the `streamchat` loggers.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"

    LEVEL_STYLES = {
        logging.DEBUG: "dim white",
        logging.INFO: "cyan",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "bold red",
    }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, markup=False, highlight=False, auto_scroll=True, wrap=True, **kwargs)

    def write_record(self, record: logging.LogRecord, formatted: str) -> None:
        style = self.LEVEL_STYLES.get(record.levelno, "white")
        line = Text()
        line.append(f"{record.levelname:<8}", style=style)
        line.append(f" {record.name}: ", style="bold")
        line.append(formatted)
        self.write(line)

    def toggle(self) -> bool:
        """Toggle visibility. Returns True if now visible."""
        self.display = not self.display
        return self.display


class PanelLogHandler(logging.Handler):
    """Logging handler that forwards records to a LogPanel.

    Records may arrive from other threads (httpx, asyncio internals), so
    writes go through call_from_thread when needed.
    """

    def __init__(self, panel: LogPanel, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            formatted = self.format(record)
            app = self._panel.app
            if app._thread_id == threading.get_ident():
                self._panel.write_record(record, formatted)
            else:
                app.call_from_thread(self._panel.write_record, record, formatted)
        except Exception:
            self.handleError(record)
