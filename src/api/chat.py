"""Chat relay endpoints.

``POST /api/chat`` returns the complete reply as JSON. ``POST /api/chat/stream``
forwards provider deltas as Server-Sent Events:

    data: {"delta": "..."}            one frame per non-empty delta
    event: done / data: {}            after the last delta
    event: error / data: {"error": "stream_error", "message": "..."}

Either terminal event closes the stream.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, StreamingResponse

from src.agent.chat_agent import TutorService, TutorServiceError, fallback_title, get_tutor_service
from src.models.schemas import ChatRequest, ChatResponse, ErrorResponse, StreamDelta, StreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

DONE_EVENT = "event: done\ndata: {}\n\n"


def tutor_service() -> TutorService:
    """Resolve the tutor service, reporting missing configuration as 503."""
    try:
        return get_tutor_service()
    except ValueError as e:
        logger.error(f"Tutor service is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tutor service is not configured",
        ) from e


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


def _latest_question(request: ChatRequest) -> str:
    for message in reversed(request.messages):
        if message.is_user:
            return message.text
    return request.messages[-1].text


def format_sse_data(delta: str) -> str:
    return f"data: {StreamDelta(delta=delta).model_dump_json()}\n\n"


def format_sse_error(message: str) -> str:
    return f"event: error\ndata: {StreamError(message=message).model_dump_json()}\n\n"


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    service: TutorService = Depends(tutor_service),
) -> ChatResponse | JSONResponse:
    """Relay a conversation and return the complete reply.

    Args:
        request: Conversation and title flag.
        service: Tutor service (injected).

    Returns:
        ChatResponse with the reply text and, if requested, a title.

    Raises:
        422: Invalid request body.
        500: Provider failure or empty reply (``{"error": ...}``).
    """
    try:
        text = await service.get_response(request.messages)
    except TutorServiceError as e:
        logger.error(f"Error in chat API: {e}")
        return _error_response("Failed to generate response")

    if not text:
        logger.warning("Provider returned an empty response")
        return _error_response("No response generated")

    title = None
    if request.generate_title:
        question = _latest_question(request)
        try:
            title = await service.generate_title(question)
        except TutorServiceError as e:
            logger.warning(f"Title generation failed: {e}")
            title = fallback_title(question)

    return ChatResponse(text=text, title=title)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    service: TutorService = Depends(tutor_service),
) -> StreamingResponse:
    """Relay a conversation and stream the reply as Server-Sent Events.

    Args:
        request: Conversation to relay.
        service: Tutor service (injected).

    Returns:
        ``text/event-stream`` response forwarding deltas as they arrive.
    """

    async def event_stream() -> AsyncGenerator[str]:
        try:
            async for delta in service.stream_response(request.messages):
                yield format_sse_data(delta)
        except TutorServiceError as e:
            logger.error(f"Streaming chat failed: {e}")
            yield format_sse_error(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected error while streaming chat")
            yield format_sse_error(str(e))
            return

        yield DONE_EVENT

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
