"""
Agent Runner
============

Adapts a pydantic-ai Agent to the contract the chat session relies on:

1. ``await runner.run(prompt)`` returns one final ``RunResult``.
2. ``runner.run_streamed(prompt)`` returns a ``StreamedRun`` whose
   ``stream_events()`` is an async sequence of ``StreamChunk`` objects.
   Text-bearing chunks carry ``chunk.data.delta``.
3. Four lifecycle notifications, delivered to a ``RunHooks`` subscriber.

LIFECYCLE NOTIFICATIONS
-----------------------

| Hook            | Fired when                                  |
|-----------------|---------------------------------------------|
| on_agent_start  | agent.iter() has opened the run             |
| on_tool_start   | FunctionToolCallEvent (tool about to run)   |
| on_tool_end     | FunctionToolResultEvent (tool returned)     |
| on_agent_end    | last node processed, final output available |

STREAMED RUNS
-------------
A streamed run is produced by its own asyncio task. Each chunk is handed over
through a queue and the producer waits until the consumer asks for the next
one before it continues, so a notification never overtakes a chunk the
consumer has not read yet. ``on_agent_start`` fires before the first chunk,
so a caller can wait for it before reading anything.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable

from loguru import logger
from pydantic_ai import Agent

# pydantic-ai's internal output tool, not a user-visible tool call
OUTPUT_TOOL_NAME = "final_result"

_DONE = object()


class RunHooks:
    """Subscriber for agent run lifecycle notifications.

    Subclasses override the callbacks they care about. Callbacks are invoked
    on the event loop thread and must not block.
    """

    def on_agent_start(self, agent_name: str) -> None:
        pass

    def on_agent_end(self, output: Any) -> None:
        pass

    def on_tool_start(self, tool_name: str) -> None:
        pass

    def on_tool_end(self, tool_name: str) -> None:
        pass


@dataclass
class TextDelta:
    """Incremental fragment of generated text."""

    delta: str


@dataclass
class StreamChunk:
    """One item of a streamed run.

    type is "raw_response_event" for text (data is a TextDelta),
    "tool_call_item" / "tool_output_item" for tool activity (data is the
    pydantic-ai event).
    """

    type: str
    data: Any = None


@dataclass
class RunResult:
    """Final result of a non-streamed run."""

    final_output: Any
    agent_name: str | None = None


class StreamedRun:
    """Handle on a run that is being produced in the background.

    stream_events() can be iterated once. It ends when the run ends and
    re-raises the run's exception, if any, after the last chunk. The
    producer stays suspended on each chunk until the consumer requests
    the next one.
    """

    def __init__(self):
        self.task: asyncio.Task | None = None
        self.final_output: Any = None
        self._queue: asyncio.Queue = asyncio.Queue()
        self._consumed = False

    @property
    def is_complete(self) -> bool:
        return self.task is not None and self.task.done()

    async def _emit(self, chunk: StreamChunk) -> None:
        await self._queue.put(chunk)
        await self._queue.join()

    def _finish(self) -> None:
        self._queue.put_nowait(_DONE)

    async def stream_events(self) -> AsyncIterator[StreamChunk]:
        if self._consumed:
            raise RuntimeError("stream_events() can only be iterated once")
        self._consumed = True

        try:
            while True:
                chunk = await self._queue.get()
                if chunk is _DONE:
                    break
                yield chunk
                self._queue.task_done()

            if self.task is not None:
                await self.task
        finally:
            # Consumer stopped early
            if self.task is not None and not self.task.done():
                self.task.cancel()


def _tool_name_from_result(event: Any) -> str:
    """Tool name of a FunctionToolResultEvent.

    The returned part is event.part on current pydantic-ai and event.result
    on older 1.x releases.
    """
    part = getattr(event, "part", None) or getattr(event, "result", None)
    return getattr(part, "tool_name", None) or "unknown"


def _text_from_model_event(event: Any) -> str | None:
    """Text carried by a model request stream event, if any."""
    event_type = type(event).__name__

    if event_type == "PartStartEvent" and type(event.part).__name__ == "TextPart":
        return event.part.content or None

    if event_type == "PartDeltaEvent" and hasattr(event.delta, "content_delta"):
        return event.delta.content_delta or None

    return None


class AgentRunner:
    """Runs a pydantic-ai Agent and reports its lifecycle to RunHooks."""

    def __init__(self, agent: Agent):
        self.agent = agent

    @property
    def agent_name(self) -> str:
        return self.agent.name or "agent"

    async def run(
        self,
        prompt: str,
        *,
        deps: Any = None,
        hooks: RunHooks | None = None,
    ) -> RunResult:
        """Run to completion and return the final result."""
        output = await self._drive(prompt, deps, hooks or RunHooks(), emit=None)
        return RunResult(final_output=output, agent_name=self.agent_name)

    def run_streamed(
        self,
        prompt: str,
        *,
        deps: Any = None,
        hooks: RunHooks | None = None,
    ) -> StreamedRun:
        """Start a streamed run in the background and return its handle.

        Must be called from a running event loop.
        """
        streamed = StreamedRun()

        async def produce() -> Any:
            try:
                streamed.final_output = await self._drive(
                    prompt, deps, hooks or RunHooks(), emit=streamed._emit
                )
                return streamed.final_output
            finally:
                streamed._finish()

        streamed.task = asyncio.create_task(produce())
        return streamed

    async def _drive(
        self,
        prompt: str,
        deps: Any,
        hooks: RunHooks,
        emit: Callable[[StreamChunk], Awaitable[None]] | None,
    ) -> Any:
        """Iterate the agent graph, firing hooks and emitting chunks.

        With emit=None model requests are made without streaming.
        """
        async with self.agent.iter(prompt, deps=deps) as agent_run:
            hooks.on_agent_start(self.agent_name)

            async for node in agent_run:
                if Agent.is_model_request_node(node):
                    if emit is None:
                        continue
                    async with node.stream(agent_run.ctx) as request_stream:
                        async for event in request_stream:
                            content = _text_from_model_event(event)
                            if content:
                                await emit(StreamChunk("raw_response_event", TextDelta(content)))

                elif Agent.is_call_tools_node(node):
                    async with node.stream(agent_run.ctx) as tools_stream:
                        async for event in tools_stream:
                            event_type = type(event).__name__

                            if event_type == "FunctionToolCallEvent":
                                tool_name = event.part.tool_name
                                if tool_name == OUTPUT_TOOL_NAME:
                                    continue
                                logger.debug(f"Tool call: {tool_name}({event.part.args})")
                                hooks.on_tool_start(tool_name)
                                if emit is not None:
                                    await emit(StreamChunk("tool_call_item", event))

                            elif event_type == "FunctionToolResultEvent":
                                tool_name = _tool_name_from_result(event)
                                if tool_name == OUTPUT_TOOL_NAME:
                                    continue
                                hooks.on_tool_end(tool_name)
                                if emit is not None:
                                    await emit(StreamChunk("tool_output_item", event))

            output = agent_run.result.output if agent_run.result is not None else None

        hooks.on_agent_end(output)
        return output
