"""
Pytest configuration and shared fixtures for merchantchat tests.

Test Organization:
- tests/unit/ - Mock-only tests, no LLM calls or network

Agents are real pydantic-ai agents backed by FunctionModel, so runs go
through agent.iter() exactly as they do in production.
"""

import json
import re
from typing import AsyncIterator

import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart, ToolCallPart, ToolReturnPart
from pydantic_ai.models.function import AgentInfo, DeltaToolCall, FunctionModel

from merchantchat.agentic.agent import create_merchant_agent

STATUS_LINE = re.compile(r'\{"type": "status".*?\}\n')

TOOL_ARGS = {"user_id": "275"}


def _has_tool_return(messages: list[ModelMessage]) -> bool:
    return any(
        isinstance(part, ToolReturnPart)
        for message in messages
        for part in getattr(message, "parts", [])
    )


def build_function_model(
    text_chunks: tuple[str, ...] = ("4",),
    call_tool: bool = False,
    fail_with: Exception | None = None,
    text_before_tool: str | None = None,
) -> FunctionModel:
    """FunctionModel answering with text_chunks, optionally after one get_user_info call.

    text_before_tool is sent in the same response as the tool call.

    fail_with is raised by the non-streaming function and, in streaming,
    after the text chunks have been sent.
    """

    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if fail_with is not None:
            raise fail_with
        if call_tool and not _has_tool_return(messages):
            parts = [TextPart(text_before_tool)] if text_before_tool else []
            parts.append(ToolCallPart(tool_name="get_user_info", args=TOOL_ARGS))
            return ModelResponse(parts=parts)
        return ModelResponse(parts=[TextPart("".join(text_chunks))])

    async def stream_respond(messages: list[ModelMessage], info: AgentInfo) -> AsyncIterator:
        if call_tool and not _has_tool_return(messages):
            if text_before_tool:
                yield text_before_tool
            yield {1: DeltaToolCall(name="get_user_info", json_args=json.dumps(TOOL_ARGS))}
            return
        for chunk in text_chunks:
            yield chunk
        if fail_with is not None:
            raise fail_with

    return FunctionModel(respond, stream_function=stream_respond)


@pytest.fixture
def make_agent():
    """Factory for merchant agents backed by a FunctionModel."""

    def _make(**kwargs):
        return create_merchant_agent(model=build_function_model(**kwargs))

    return _make


@pytest.fixture
def split_stream():
    """Split a streamed body into (parsed status lines, concatenated text)."""

    def _split(body: str) -> tuple[list[dict], str]:
        statuses = [json.loads(m.group()) for m in STATUS_LINE.finditer(body)]
        return statuses, STATUS_LINE.sub("", body)

    return _split
