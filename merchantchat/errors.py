"""Application-level exception types for merchantchat."""


class MerchantChatError(Exception):
    """Base exception for merchantchat."""


class AgentInitializationError(MerchantChatError):
    """Raised when the merchant agent cannot be constructed."""


class RunStartError(MerchantChatError):
    """Raised when an agent run ends without ever reporting that it started."""


class RunStartTimeoutError(RunStartError, TimeoutError):
    """Raised when an agent run does not start within the allowed time."""
