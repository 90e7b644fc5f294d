"""Status event types for streaming responses.

All events are Pydantic models for consistent serialization.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel


class AgentStartEvent(BaseModel):
    """Agent run started."""

    type: Literal["agent_start"] = "agent_start"
    agent: str


class AgentEndEvent(BaseModel):
    """Agent run finished with its final output."""

    type: Literal["agent_end"] = "agent_end"
    output: Any = None


class ToolStartEvent(BaseModel):
    """Agent is about to run a tool."""

    type: Literal["agent_tool_start"] = "agent_tool_start"
    tool: str


class ToolEndEvent(BaseModel):
    """Tool returned."""

    type: Literal["agent_tool_end"] = "agent_tool_end"
    tool: str


StatusEvent = Union[AgentStartEvent, AgentEndEvent, ToolStartEvent, ToolEndEvent]
