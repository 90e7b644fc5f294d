"""Merchant agent and the runner that drives it.

Components:
- agent.py: Agent definition (instructions, tools, MerchantContext)
- runner.py: AgentRunner with lifecycle hooks and background streaming
"""

from merchantchat.agentic.agent import (
    MERCHANT_AGENT_NAME,
    MerchantContext,
    create_merchant_agent,
    get_user_info,
)
from merchantchat.agentic.runner import (
    AgentRunner,
    RunHooks,
    RunResult,
    StreamChunk,
    StreamedRun,
    TextDelta,
)

__all__ = [
    # Agent
    "MERCHANT_AGENT_NAME",
    "MerchantContext",
    "create_merchant_agent",
    "get_user_info",
    # Runner
    "AgentRunner",
    "RunHooks",
    "RunResult",
    "StreamChunk",
    "StreamedRun",
    "TextDelta",
]
