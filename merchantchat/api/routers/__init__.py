"""API routers for merchantchat.

Routers:
- chat_router: POST /chat
"""

from merchantchat.api.routers.chat import get_agent_factory, router as chat_router

__all__ = [
    "chat_router",
    "get_agent_factory",
]
