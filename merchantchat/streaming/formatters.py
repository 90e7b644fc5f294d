"""Output fragment formatting.

The streamed body mixes two kinds of fragment:
- Status lines: one JSON object per line, {"type": "status", "event": ...}\n
- Text deltas: raw model text, written as-is
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic_core import to_jsonable_python

from merchantchat.streaming.events import StatusEvent

STATUS_TYPE = "status"


def format_status_line(event: StatusEvent) -> str:
    """Format a status event as a single newline-terminated JSON line.

    The event's own type goes under "event" so the line keeps its "status" tag.
    """
    payload = event.model_dump(exclude={"type"})
    data = {"type": STATUS_TYPE, "event": event.type, **payload}
    # json.dumps escapes embedded newlines, keeping the record on one line
    return json.dumps(to_jsonable_python(data, fallback=str)) + "\n"


def parse_status_line(line: str) -> dict[str, Any] | None:
    """Parse a status line back into a dict.

    Returns None for anything that is not a status record.
    """
    line = line.strip()
    if not line.startswith("{"):
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    if isinstance(data, dict) and data.get("type") == STATUS_TYPE:
        return data
    return None


def extract_text_delta(chunk: Any) -> str | None:
    """Text delta carried by a content chunk (chunk.data.delta), if any.

    Accepts attribute or mapping access at both levels.
    """
    data = chunk.get("data") if isinstance(chunk, Mapping) else getattr(chunk, "data", None)
    if data is None:
        return None

    delta = data.get("delta") if isinstance(data, Mapping) else getattr(data, "delta", None)
    return delta if isinstance(delta, str) else None
