"""Main Textual TUI application.

Wires a ChatSession to the transcript view and input bar. The session owns
all chat state; the app only re-renders when the session reports a change.
"""

import logging

import httpx
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..client import ChatSession
from .styles import APP_CSS
from .widgets import ChatInputBar, LogPanel, PanelLogHandler, TranscriptView

logger = logging.getLogger(__name__)


class StreamChatApp(App):
    """Textual TUI for streaming chat against the relay."""

    CSS = APP_CSS
    TITLE = "Streaming AI Chat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_log", "Log"),
    ]

    def __init__(self, http: httpx.AsyncClient, log_level: str | None = None) -> None:
        super().__init__()
        self._log_level = log_level
        self._log_handler: PanelLogHandler | None = None
        self.session = ChatSession(http, on_change=self._on_session_change)
        self.sub_title = str(http.base_url)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield TranscriptView(id="transcript")
        yield LogPanel(id="log-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.theme = "catppuccin-mocha"

        panel = self.query_one("#log-panel", LogPanel)
        self._log_handler = PanelLogHandler(panel)
        self._log_handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger = logging.getLogger("streamchat")
        package_logger.addHandler(self._log_handler)
        if self._log_level is not None:
            package_logger.setLevel(self._log_level.upper())
            panel.display = True
            logger.info("Log panel enabled with level: %s", self._log_level.upper())

        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        if self._log_handler is not None:
            logging.getLogger("streamchat").removeHandler(self._log_handler)
            self._log_handler = None

    def _on_session_change(self, session: ChatSession) -> None:
        self.query_one("#transcript", TranscriptView).sync(session.transcript, session.busy)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_value(session.input)
        input_bar.set_busy(session.busy)

    def on_chat_input_bar_edited(self, event: ChatInputBar.Edited) -> None:
        self.session.input = event.value

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self.session.input = event.value
        self._submit()

    @work(group="chat")
    async def _submit(self) -> None:
        """Run the submission as a background worker so the UI stays live."""
        await self.session.submit()

    def action_toggle_log(self) -> None:
        visible = self.query_one("#log-panel", LogPanel).toggle()
        self.notify(f"Log panel {'shown' if visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        response = self.session.transcript.last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(relay_url: str, log_level: str | None = None) -> None:
    """Run the chat TUI against the relay at `relay_url`.

    Args:
        relay_url: Base URL of a running relay
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    async with httpx.AsyncClient(base_url=relay_url, timeout=None) as http:
        app = StreamChatApp(http, log_level=log_level)
        await app.run_async()
