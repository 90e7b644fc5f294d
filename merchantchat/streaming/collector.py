"""Status collection and the start gate.

StatusCollector is the RunHooks subscriber for a streamed run. Every
notification becomes a StatusEvent in an unbounded FIFO queue.

The first start notification also sets a one-shot event. wait_for_start()
waits on that event once per run before anything is streamed.
"""

import asyncio
from typing import Any

from loguru import logger

from merchantchat.agentic.runner import RunHooks
from merchantchat.errors import RunStartError, RunStartTimeoutError
from merchantchat.streaming.events import (
    AgentEndEvent,
    AgentStartEvent,
    StatusEvent,
    ToolEndEvent,
    ToolStartEvent,
)


class StatusCollector(RunHooks):
    """Buffers lifecycle notifications as StatusEvents, in arrival order.

    Callbacks run to completion on the event loop and there is a single
    consumer, so the queue needs no extra locking.
    """

    def __init__(self):
        self.queue: asyncio.Queue[StatusEvent] = asyncio.Queue()
        self.started = asyncio.Event()

    @property
    def has_started(self) -> bool:
        return self.started.is_set()

    def record(self, event: StatusEvent) -> None:
        logger.debug(f"Status: {event.type}")
        if isinstance(event, AgentStartEvent):
            self.started.set()
        self.queue.put_nowait(event)

    def on_agent_start(self, agent_name: str) -> None:
        self.record(AgentStartEvent(agent=agent_name))

    def on_agent_end(self, output: Any) -> None:
        self.record(AgentEndEvent(output=output))

    def on_tool_start(self, tool_name: str) -> None:
        self.record(ToolStartEvent(tool=tool_name))

    def on_tool_end(self, tool_name: str) -> None:
        self.record(ToolEndEvent(tool=tool_name))

    def drain(self) -> list[StatusEvent]:
        """Remove and return every queued event, oldest first."""
        events = []
        while not self.queue.empty():
            events.append(self.queue.get_nowait())
        return events


async def wait_for_start(
    collector: StatusCollector,
    *,
    timeout: float | None = None,
    run_task: asyncio.Task | None = None,
) -> None:
    """Block until the collector has seen the run start.

    Args:
        collector: Collector subscribed to the run
        timeout: Seconds to wait; None waits without bound
        run_task: Task producing the run. If it ends before the start
            notification, its exception is raised here (or RunStartError
            if it ended cleanly).

    Raises:
        RunStartTimeoutError: timeout elapsed; run_task is cancelled.
        RunStartError: run_task finished without starting.
    """
    if collector.has_started:
        return

    started = asyncio.create_task(collector.started.wait())
    watched = {started}
    if run_task is not None:
        watched.add(run_task)

    try:
        await asyncio.wait(watched, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if not started.done():
            started.cancel()

    if collector.has_started:
        return

    if run_task is not None and run_task.done():
        if not run_task.cancelled() and run_task.exception() is not None:
            raise run_task.exception()
        raise RunStartError("Agent run ended before it started")

    if run_task is not None:
        run_task.cancel()
    raise RunStartTimeoutError(f"Agent run did not start within {timeout}s")
