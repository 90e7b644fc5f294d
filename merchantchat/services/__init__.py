"""merchantchat services."""

from merchantchat.services.session import (
    ASSISTANT,
    RESULT_EXTRACTORS,
    SEPARATOR,
    USER,
    ChatResult,
    MerchantSession,
    append_turn,
    build_prompt,
    extract_final_output,
)

__all__ = [
    "ASSISTANT",
    "RESULT_EXTRACTORS",
    "SEPARATOR",
    "USER",
    "ChatResult",
    "MerchantSession",
    "append_turn",
    "build_prompt",
    "extract_final_output",
]
