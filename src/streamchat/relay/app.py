"""HTTP relay between a chat client and the upstream completion service.

Hides how the upstream delta stream is bridged onto a plain-text HTTP
response: validation, priming the upstream call, and the policy applied
when the upstream fails part way through.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from ..config import RELAY_PATH, Settings, get_llm, load_settings
from ..llm import ChatMessage, LLMProvider
from ..llm.models import StreamingResponse as DeltaStream
from .models import MISSING_QUERY, SERVER_ERROR, ErrorBody

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(ErrorBody(error=message).model_dump(), status_code=status_code)


async def _first_delta(stream: DeltaStream) -> str | None:
    """Pull the first non-empty delta, or None if generation ended without one."""
    async for delta in stream:
        if delta:
            return delta
    return None


async def _forward(first: str | None, stream: DeltaStream) -> AsyncIterator[bytes]:
    """Re-emit upstream deltas as UTF-8 bytes, in order, without batching.

    An upstream error after the response has started is logged and ends the
    body early. The client sees a clean end of stream with partial text.
    """
    if first is None:
        return
    yield first.encode("utf-8")
    try:
        async for delta in stream:
            if delta:
                yield delta.encode("utf-8")
    except Exception:
        # Headers are already sent; truncating is the only option left
        logger.exception("Upstream stream failed mid-response, closing early")
        return
    if stream.usage:
        logger.debug("Upstream usage: %s", stream.usage)


@router.post(RELAY_PATH)
async def relay(request: Request) -> Response:
    """Relay a single-turn prompt to the upstream service.

    Request body: {"query": str}

    Responses:
        200 text/plain stream of concatenated fragments
        400 {"error": "Missing query"}
        500 {"error": "Something went wrong"} (only before streaming starts)
    """
    try:
        body = await request.json()
    except Exception:
        logger.exception("Could not parse request body")
        return _error(500, SERVER_ERROR)

    query = body.get("query") if isinstance(body, dict) else None
    if not isinstance(query, str) or not query:
        logger.info("Rejected request without query")
        return _error(400, MISSING_QUERY)

    llm: LLMProvider | None = request.app.state.llm
    try:
        if llm is None:
            raise RuntimeError("Upstream provider not configured (OPENAI_API_KEY missing)")
        stream = await llm.chat_completion_stream(
            [ChatMessage(role="user", content=query)]
        )
        # Surface connection and auth failures as 500 before committing to 200
        first = await _first_delta(stream)
    except Exception:
        logger.exception("Upstream request failed before streaming")
        return _error(500, SERVER_ERROR)

    return StreamingResponse(
        _forward(first, stream),
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )


def create_app(
    llm: LLMProvider | None = None,
    *,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        llm: Upstream provider to use. When omitted it is built from settings.
        settings: Process settings (default: read from the environment)

    Returns:
        FastAPI app with the relay route mounted
    """
    if llm is None:
        llm = get_llm(settings or load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if app.state.llm is not None:
            await app.state.llm.close()

    app = FastAPI(title="streamchat relay", lifespan=lifespan)
    app.state.llm = llm
    app.include_router(router)
    return app
