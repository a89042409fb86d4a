"""Main CLI application using Typer."""
import asyncio

import httpx
import typer
from rich.console import Console

from ..client import ChatSession
from ..config import load_settings
from ..log import configure_logging

app = typer.Typer(
    name="streamchat",
    help="Streaming chat relay and terminal client",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


@app.command()
def serve(
    host: str | None = typer.Option(
        None,
        "--host",
        help="Bind host (default: STREAMCHAT_HOST or 127.0.0.1)"
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Bind port (default: STREAMCHAT_PORT or 8000)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="debug, info, warning or error (default: STREAMCHAT_LOG_LEVEL or info)"
    ),
):
    """Run the streaming relay server."""
    import uvicorn

    from ..relay import create_app

    settings = load_settings()
    level = log_level or settings.log_level
    configure_logging(level)

    relay_app = create_app(settings=settings)
    console.print(f"[dim]Relaying to model {settings.openai_model}[/dim]")
    uvicorn.run(
        relay_app,
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
        log_level=level.lower(),
    )


@app.command(name="tui")
def tui_command(
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="Relay base URL (default: STREAMCHAT_URL)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat TUI."""
    from ..ui import run_textual_tui

    settings = load_settings()
    try:
        asyncio.run(run_textual_tui(url or settings.relay_url, log_level=log_level))
    except KeyboardInterrupt:
        pass


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="Relay base URL (default: STREAMCHAT_URL)"
    ),
):
    """Send one prompt and stream the answer to the terminal."""
    settings = load_settings()
    configure_logging("WARNING")

    if not prompt.strip():
        console.print("[red]Error: prompt is empty[/red]")
        raise typer.Exit(code=1)

    async def _ask():
        printed = 0
        entry = 0

        def on_change(session: ChatSession) -> None:
            nonlocal printed, entry
            last = session.transcript.last
            if last is None or last.role != "assistant":
                return
            if len(session.transcript) != entry:
                # New assistant entry (the failure message after partial text)
                if printed:
                    console.print()
                entry = len(session.transcript)
                printed = 0
            console.print(last.content[printed:], end="", markup=False, highlight=False)
            printed = len(last.content)

        async with httpx.AsyncClient(base_url=url or settings.relay_url, timeout=None) as http:
            session = ChatSession(http, on_change=on_change)
            await session.ask(prompt)
            console.print()

    asyncio.run(_ask())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
