"""Unit tests for create_merchant_agent."""

import pytest

from merchantchat.agentic.agent import MERCHANT_AGENT_NAME, create_merchant_agent
from merchantchat.errors import AgentInitializationError
from merchantchat.settings import settings


class TestCreateMerchantAgent:
    """Tests for agent construction."""

    def test_missing_openai_key_fails_early(self, monkeypatch):
        monkeypatch.setattr(settings.llm, "openai_api_key", None)

        with pytest.raises(AgentInitializationError, match="OPENAI_API_KEY"):
            create_merchant_agent(model="openai:gpt-4.1")

    def test_default_model_checked_too(self, monkeypatch):
        monkeypatch.setattr(settings.llm, "openai_api_key", None)
        monkeypatch.setattr(settings.llm, "default_model", "openai:gpt-4.1")

        with pytest.raises(AgentInitializationError):
            create_merchant_agent()

    def test_model_instance_needs_no_key(self, monkeypatch, make_agent):
        monkeypatch.setattr(settings.llm, "openai_api_key", None)

        agent = make_agent()

        assert agent.name == MERCHANT_AGENT_NAME
