"""Unit tests for status line framing and text delta extraction."""

import json
from types import SimpleNamespace

from pydantic import BaseModel

from merchantchat.agentic.runner import StreamChunk, TextDelta
from merchantchat.streaming.events import AgentEndEvent, AgentStartEvent, ToolEndEvent, ToolStartEvent
from merchantchat.streaming.formatters import extract_text_delta, format_status_line, parse_status_line


class TestFormatStatusLine:
    """Tests for format_status_line."""

    def test_agent_start_line(self):
        line = format_status_line(AgentStartEvent(agent="Merchant AmA Agent"))

        assert line.endswith("\n")
        assert line.count("\n") == 1
        assert json.loads(line) == {
            "type": "status",
            "event": "agent_start",
            "agent": "Merchant AmA Agent",
        }

    def test_tool_events(self):
        start = json.loads(format_status_line(ToolStartEvent(tool="get_user_info")))
        end = json.loads(format_status_line(ToolEndEvent(tool="get_user_info")))

        assert start == {"type": "status", "event": "agent_tool_start", "tool": "get_user_info"}
        assert end == {"type": "status", "event": "agent_tool_end", "tool": "get_user_info"}

    def test_multiline_output_stays_on_one_line(self):
        line = format_status_line(AgentEndEvent(output="line one\nline two"))

        assert line.count("\n") == 1
        assert json.loads(line)["output"] == "line one\nline two"

    def test_structured_output_is_serialized(self):
        class Answer(BaseModel):
            finalOutput: str
            happinessLevel: bool

        line = format_status_line(AgentEndEvent(output=Answer(finalOutput="4", happinessLevel=True)))

        assert json.loads(line)["output"] == {"finalOutput": "4", "happinessLevel": True}

    def test_unserializable_output_falls_back_to_str(self):
        class Opaque:
            def __str__(self):
                return "opaque-result"

        line = format_status_line(AgentEndEvent(output=Opaque()))

        assert json.loads(line)["output"] == "opaque-result"


class TestParseStatusLine:
    """Tests for parse_status_line."""

    def test_round_trips_status(self):
        line = format_status_line(ToolStartEvent(tool="search"))
        assert parse_status_line(line)["tool"] == "search"

    def test_plain_text_is_not_status(self):
        assert parse_status_line("The answer is 4") is None

    def test_other_json_is_not_status(self):
        assert parse_status_line('{"type": "message", "content": "hi"}') is None
        assert parse_status_line("[1, 2]") is None

    def test_broken_json_is_not_status(self):
        assert parse_status_line('{"type": "status"') is None


class TestExtractTextDelta:
    """Tests for extract_text_delta."""

    def test_text_chunk(self):
        assert extract_text_delta(StreamChunk("raw_response_event", TextDelta("4"))) == "4"

    def test_mapping_chunk(self):
        assert extract_text_delta({"type": "raw", "data": {"delta": "hi"}}) == "hi"

    def test_chunk_without_data(self):
        assert extract_text_delta(StreamChunk("tool_output_item")) is None
        assert extract_text_delta(None) is None
        assert extract_text_delta("text") is None

    def test_data_without_delta(self):
        assert extract_text_delta(SimpleNamespace(data=SimpleNamespace(tool_name="x"))) is None

    def test_non_string_delta(self):
        assert extract_text_delta({"data": {"delta": {"nested": True}}}) is None
