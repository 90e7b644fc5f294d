"""Chat router.

Provides:
- POST /chat - Merchant chat, JSON or interleaved status/text stream

Request body:
    {"merchantId": 1, "message": "2+2?", "conversationHistory": "User: ...\\n\\nAssistant: ..."}

Headers:
- stream: "true" or "1" selects streaming mode

Every request builds a fresh MerchantSession; the conversation history is
owned by the client and sent back on each turn.
"""

from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic_ai import Agent

from merchantchat.agentic.agent import create_merchant_agent
from merchantchat.services.session import MerchantSession

router = APIRouter(tags=["chat"])

STREAM_HEADER = "stream"
STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"


class ChatRequest(BaseModel):
    """Chat request body. Required fields are checked by the route."""

    model_config = ConfigDict(populate_by_name=True)

    merchant_id: int | None = Field(default=None, alias="merchantId")
    message: str | None = None
    conversation_history: str | None = Field(default=None, alias="conversationHistory")


def get_agent_factory() -> Callable[[], Agent]:
    """Agent factory used for new sessions (overridable in tests)."""
    return create_merchant_agent


def _is_stream_requested(value: str | None) -> bool:
    return value in ("true", "1")


@router.post("/chat")
async def chat(
    request: ChatRequest,
    req: Request,
    agent_factory: Callable[[], Agent] = Depends(get_agent_factory),
):
    """
    Chat with the merchant agent.

    Non-streaming: 200 {"finalOutput", "updatedHistory"}, 500 {"error"} on failure.

    Streaming: 200 text/plain body written incrementally. Status lines are
    single-line JSON records tagged "type": "status"; everything else is raw
    model text. A failure before the run starts gives 500 "Error: ...";
    a failure mid-stream appends "Error: ..." to the partial body.
    """
    if not request.merchant_id or not request.message:
        return JSONResponse(
            {"error": "merchantId and message are required"},
            status_code=400,
        )

    if _is_stream_requested(req.headers.get(STREAM_HEADER)):
        try:
            session = MerchantSession(request.merchant_id, agent_factory=agent_factory)
            fragments = await session.handle_message_stream(
                request.message, request.conversation_history
            )
        except Exception as e:
            logger.error(f"Chat stream error: {e}")
            return PlainTextResponse(f"Error: {e}", status_code=500)

        async def stream_with_errors():
            """Relay fragments; a mid-stream failure becomes an error suffix."""
            try:
                async for fragment in fragments:
                    yield fragment
            except Exception as e:
                logger.error(f"Chat stream error: {e}")
                yield f"Error: {e}"

        return StreamingResponse(stream_with_errors(), media_type=STREAM_MEDIA_TYPE)

    try:
        session = MerchantSession(request.merchant_id, agent_factory=agent_factory)
        result = await session.handle_message(request.message, request.conversation_history)
    except Exception as e:
        logger.error(f"Chat error: {e}")
        return JSONResponse({"error": str(e)}, status_code=500)

    return {"finalOutput": result.final_output, "updatedHistory": result.updated_history}
