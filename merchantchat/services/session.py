"""Merchant chat session.

The session turns one user message plus the caller-held transcript into an
agent run and hands back the updated transcript. Nothing is stored between
requests: the caller persists the returned history and resends it next turn.

Transcript format:

    User: hi

    Assistant: hello

    User: what is 2+2?
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable

from loguru import logger
from pydantic_ai import Agent
from pydantic_core import to_jsonable_python

from merchantchat.agentic.agent import MerchantContext, create_merchant_agent
from merchantchat.agentic.runner import AgentRunner, RunResult, StreamedRun
from merchantchat.errors import AgentInitializationError
from merchantchat.settings import settings
from merchantchat.streaming.collector import StatusCollector, wait_for_start
from merchantchat.streaming.core import interleave

USER = "User"
ASSISTANT = "Assistant"
SEPARATOR = "\n\n"


def append_turn(transcript: str | None, role: str, text: str) -> str:
    """Return transcript with one more turn appended."""
    turn = f"{role}: {text}"
    if not transcript:
        return turn
    return f"{transcript}{SEPARATOR}{turn}"


def build_prompt(prior_transcript: str | None, user_message: str) -> str:
    """Prompt for the agent: the prior transcript followed by the new user turn."""
    return append_turn(prior_transcript, USER, user_message)


# =============================================================================
# RESULT EXTRACTION
# =============================================================================
#
# Agent results come in several shapes (plain string output, structured output
# with a "response" field, objects exposing a text alias). Each extractor is a
# pure function result -> str | None. They are tried in order; the JSON
# fallback always answers.
# =============================================================================

FINAL_OUTPUT_FIELDS = ("final_output", "finalOutput", "output")
TEXT_ALIAS_FIELDS = ("outputText", "output_text", "text")


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _final_output(result: Any) -> Any:
    for name in FINAL_OUTPUT_FIELDS:
        value = _field(result, name)
        if value is not None:
            return value
    return None


def _to_json(value: Any) -> str:
    try:
        return json.dumps(to_jsonable_python(value, fallback=str))
    except (TypeError, ValueError):
        return str(value)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else _to_json(value)


def extract_plain_string(result: Any) -> str | None:
    if isinstance(result, str):
        return result
    output = _final_output(result)
    return output if isinstance(output, str) else None


def extract_nested_response(result: Any) -> str | None:
    response = _field(_final_output(result), "response")
    return _as_text(response) if response else None


def extract_text_alias(result: Any) -> str | None:
    for name in TEXT_ALIAS_FIELDS:
        value = _field(result, name)
        if value:
            return _as_text(value)
    return None


def extract_json_fallback(result: Any) -> str:
    output = _final_output(result)
    return _to_json(output if output is not None else result)


RESULT_EXTRACTORS: tuple[Callable[[Any], str | None], ...] = (
    extract_plain_string,
    extract_nested_response,
    extract_text_alias,
    extract_json_fallback,
)


def extract_final_output(result: Any) -> str:
    """Final answer text from whatever result shape the agent returned."""
    for extractor in RESULT_EXTRACTORS:
        text = extractor(result)
        if text is not None:
            return text
    return ""


@dataclass
class ChatResult:
    """Outcome of one non-streamed exchange."""

    final_output: str
    updated_history: str


class MerchantSession:
    """One merchant's chat session, built fresh for every request.

    Usage:
        session = MerchantSession(merchant_id=1)
        result = await session.handle_message("2+2?")

        stream = await session.handle_message_stream("2+2?", result.updated_history)
        async for fragment in stream:
            ...
        history = session.conversation_history
    """

    def __init__(
        self,
        merchant_id: int,
        *,
        agent_factory: Callable[[], Agent] = create_merchant_agent,
        start_timeout: float | None = None,
    ):
        self.merchant_id = merchant_id
        self.context = MerchantContext(merchant_id=merchant_id)
        self.conversation_history: str | None = None
        if start_timeout is None:
            self.start_timeout = settings.streaming.start_timeout_or_none
        else:
            # Zero or negative disables the bound, as in StreamingSettings
            self.start_timeout = start_timeout if start_timeout > 0 else None
        self.runner = self._initialize(agent_factory)

    def _initialize(self, agent_factory: Callable[[], Agent]) -> AgentRunner:
        try:
            return AgentRunner(agent_factory())
        except AgentInitializationError:
            logger.error("[MerchantSession] Error during initialization")
            raise
        except Exception as e:
            logger.error(f"[MerchantSession] Error during initialization: {e}")
            raise AgentInitializationError(str(e)) from e

    async def handle_message(
        self,
        user_message: str,
        conversation_history: str | None = None,
    ) -> ChatResult:
        """Run the agent without streaming and return the answer with the new history."""
        conversation = build_prompt(conversation_history, user_message)
        logger.info(f"[MerchantSession] handle_message (non-stream) | merchant_id={self.merchant_id}")

        try:
            result = await self.runner.run(conversation, deps=self.context)
        except Exception as e:
            logger.error(f"[MerchantSession] handle_message error: {e}")
            raise

        final_output = extract_final_output(result)
        self.conversation_history = append_turn(conversation, ASSISTANT, final_output)

        logger.info(f"[MerchantSession] handle_message final_output length: {len(final_output)}")
        return ChatResult(final_output=final_output, updated_history=self.conversation_history)

    async def handle_message_stream(
        self,
        user_message: str,
        conversation_history: str | None = None,
    ) -> AsyncIterator[str]:
        """Start a streamed run and return its interleaved status/text fragments.

        Returns once the run has reported agent_start. Failures before that
        point raise here; later failures raise from the returned iterator.
        When the iterator is exhausted, conversation_history holds the
        updated transcript.

        Raises:
            RunStartTimeoutError: the run did not start within start_timeout
        """
        conversation = build_prompt(conversation_history, user_message)
        logger.info(f"[MerchantSession] handle_message_stream | merchant_id={self.merchant_id}")

        collector = StatusCollector()
        streamed = self.runner.run_streamed(conversation, deps=self.context, hooks=collector)

        try:
            await wait_for_start(collector, timeout=self.start_timeout, run_task=streamed.task)
        except Exception as e:
            logger.error(f"[MerchantSession] handle_message_stream error: {e}")
            raise

        return self._stream_and_record(conversation, collector, streamed)

    async def _stream_and_record(
        self,
        conversation: str,
        collector: StatusCollector,
        streamed: StreamedRun,
    ) -> AsyncIterator[str]:
        try:
            async for fragment in interleave(collector, streamed.stream_events()):
                yield fragment
        except Exception as e:
            logger.error(f"[MerchantSession] handle_message_stream error: {e}")
            raise

        final_output = extract_final_output(
            RunResult(final_output=streamed.final_output, agent_name=self.runner.agent_name)
        )
        self.conversation_history = append_turn(conversation, ASSISTANT, final_output)
        logger.info(f"[MerchantSession] handle_message_stream final_output length: {len(final_output)}")

    def reset_chat(self) -> None:
        self.conversation_history = None

    async def close(self) -> None:
        """Release session resources. Nothing is held today."""
