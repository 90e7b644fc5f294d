"""Interleaved status/text streaming.

Components:
- events.py: StatusEvent types (Pydantic models)
- formatters.py: Status line framing and text delta extraction
- collector.py: StatusCollector (RunHooks -> FIFO queue) and the start gate
- core.py: interleave()
"""

from merchantchat.streaming.collector import StatusCollector, wait_for_start
from merchantchat.streaming.core import interleave
from merchantchat.streaming.events import (
    AgentEndEvent,
    AgentStartEvent,
    StatusEvent,
    ToolEndEvent,
    ToolStartEvent,
)
from merchantchat.streaming.formatters import (
    extract_text_delta,
    format_status_line,
    parse_status_line,
)

__all__ = [
    # Core streaming functions
    "interleave",
    # Collection and gate
    "StatusCollector",
    "wait_for_start",
    # Event types
    "AgentStartEvent",
    "AgentEndEvent",
    "ToolStartEvent",
    "ToolEndEvent",
    "StatusEvent",
    # Formatters
    "format_status_line",
    "parse_status_line",
    "extract_text_delta",
]
