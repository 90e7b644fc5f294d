"""Merchant agent definition.

The agent itself is plain pydantic-ai: instructions, model settings and a
(demo) tool set. Everything run-related lives in runner.py.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic_ai import Agent, RunContext

from merchantchat.errors import AgentInitializationError
from merchantchat.settings import settings

MERCHANT_AGENT_NAME = "Merchant AmA Agent"

OPENAI_MODEL_PREFIX = "openai:"

MERCHANT_AGENT_INSTRUCTIONS = """
You are a helpful assistant for merchants. Answer questions clearly and concisely.
If you don't know the answer, say so.
"""


@dataclass
class MerchantContext:
    """Run context handed to the agent and its tools as pydantic-ai deps."""

    merchant_id: int


async def get_user_info(ctx: RunContext[MerchantContext], user_id: str) -> dict[str, Any]:
    """
    Get user information.

    Args:
        user_id: The ID of the user to retrieve information for

    Returns:
        The user's id, name and email
    """
    # Placeholder data until a merchant user directory is wired in
    return {"userId": user_id, "name": "John Doe", "email": "example.com"}


MERCHANT_TOOLS = [get_user_info]


def create_merchant_agent(
    model: Any = None,
    temperature: float | None = None,
) -> Agent[MerchantContext, str]:
    """Build the merchant agent.

    Args:
        model: pydantic-ai model name or Model instance (defaults to settings)
        temperature: Sampling temperature (defaults to settings)

    Raises:
        AgentInitializationError: if the agent cannot be constructed, e.g.
            the provider credential is missing or the model name is unknown.
    """
    model = model or settings.llm.default_model
    if isinstance(model, str) and model.startswith(OPENAI_MODEL_PREFIX) and not settings.llm.openai_api_key:
        logger.error(f"Failed to create merchant agent: OPENAI_API_KEY is not configured for {model}")
        raise AgentInitializationError(f"OPENAI_API_KEY is not configured (model {model})")

    try:
        return Agent(
            model,
            name=MERCHANT_AGENT_NAME,
            instructions=MERCHANT_AGENT_INSTRUCTIONS,
            deps_type=MerchantContext,
            model_settings={
                "temperature": settings.llm.temperature if temperature is None else temperature,
            },
            tools=MERCHANT_TOOLS,
        )
    except Exception as e:
        logger.error(f"Failed to create merchant agent: {e}")
        raise AgentInitializationError(str(e)) from e
