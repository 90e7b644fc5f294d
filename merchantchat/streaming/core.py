"""
Interleaved Status / Text Streaming
===================================

Merges two asynchronous sources into one ordered stream for an HTTP client:

- Lifecycle status events, pushed by the agent runner into a StatusCollector
- Content chunks, pulled one at a time from the streamed run

STREAMING ARCHITECTURE
----------------------

    run_streamed()  ──► background task ──► chunk queue ──┐
         │                                                │ pull one
         └── RunHooks ──► StatusCollector.queue ──┐       │
                                                  │ drain │
                                                  ▼       ▼
                                             interleave() ──► str fragments

THE CYCLE
---------
1. Drain the status queue, one status line per event, oldest first
2. Pull exactly one content chunk (suspends until the run yields or ends)
3. If the chunk carries a text delta, yield it verbatim

When the content sequence ends, drain once more so events that arrived
after the last pull (agent_end in particular) are never lost.

Several status lines in a row are expected whenever several lifecycle
events happened between two pulls.

OUTPUT EXAMPLE
--------------
    {"type": "status", "event": "agent_start", "agent": "Merchant AmA Agent"}
    The answer is{"type": "status", "event": "agent_tool_start", ...}
    ...
"""

from typing import Any, AsyncIterable, AsyncIterator

from merchantchat.streaming.collector import StatusCollector
from merchantchat.streaming.formatters import extract_text_delta, format_status_line


async def interleave(
    collector: StatusCollector,
    content: AsyncIterable[Any],
) -> AsyncIterator[str]:
    """Merge queued status events with the text deltas of a content stream.

    Chunks without a text delta are consumed and produce nothing. Errors
    raised by the content stream propagate to the caller.

    Yields:
        Status lines (newline-terminated JSON) and raw text deltas
    """
    iterator = content.__aiter__()

    while True:
        for event in collector.drain():
            yield format_status_line(event)

        try:
            chunk = await iterator.__anext__()
        except StopAsyncIteration:
            break

        delta = extract_text_delta(chunk)
        if delta:
            yield delta

    for event in collector.drain():
        yield format_status_line(event)

