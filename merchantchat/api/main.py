"""merchantchat FastAPI Server.

Mounts:
- /chat - Merchant chat (JSON or interleaved status/text stream)
- /health - Health check

Architecture:
```
main.py (FastAPI app)
    └── routers/
        └── chat.py - POST /chat
```
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from merchantchat import __version__
from merchantchat.api.routers.chat import router as chat_router


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 {"error": ...} like every other client error."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = f"Invalid request: {'; '.join(problems)}"
    logger.warning(f"{request.method} {request.url.path} - {message}")
    return JSONResponse({"error": message}, status_code=400)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="merchantchat API",
        version=__version__,
        description="Merchant assistant agent with interleaved status streaming",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(chat_router)

    # Health check
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    # Root info
    @app.get("/")
    async def root() -> dict[str, Any]:
        """API information endpoint."""
        return {
            "name": "merchantchat API",
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "chat": "/chat",
                "docs": "/docs",
            },
        }

    return app


# Create default app instance
app = create_app()
