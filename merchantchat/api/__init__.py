"""merchantchat API module.

Provides:
- FastAPI application (app, create_app)
- Routers (chat_router)
"""

from merchantchat.api.main import app, create_app
from merchantchat.api.routers.chat import router as chat_router

__all__ = [
    "app",
    "create_app",
    "chat_router",
]
