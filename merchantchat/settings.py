"""merchantchat settings with environment variable support."""

import os
from pathlib import Path

# Load .env file from project root
from dotenv import load_dotenv

# Find .env file - check current dir and parent dirs
def _find_env_file() -> Path | None:
    """Find .env file in current or parent directories."""
    current = Path.cwd()
    for _ in range(5):  # Check up to 5 levels
        env_file = current / ".env"
        if env_file.exists():
            return env_file
        current = current.parent
    # Also check package directory
    pkg_dir = Path(__file__).parent.parent
    env_file = pkg_dir / ".env"
    if env_file.exists():
        return env_file
    return None

env_file = _find_env_file()
if env_file:
    load_dotenv(env_file, override=True)

from pydantic import BaseModel


class LLMSettings(BaseModel):
    """LLM provider settings."""

    default_model: str = os.getenv("LLM__DEFAULT_MODEL", "openai:gpt-4.1")
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    temperature: float = float(os.getenv("LLM__TEMPERATURE", "0.5"))


class APISettings(BaseModel):
    """HTTP server settings."""

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


class StreamingSettings(BaseModel):
    """Streaming settings.

    start_timeout bounds how long a streaming request waits for the agent
    to report that its run started. Zero or negative disables the bound.
    """

    start_timeout: float = float(os.getenv("STREAM__START_TIMEOUT", "30"))

    @property
    def start_timeout_or_none(self) -> float | None:
        return self.start_timeout if self.start_timeout > 0 else None


class Settings(BaseModel):
    """Application settings."""

    llm: LLMSettings = LLMSettings()
    api: APISettings = APISettings()
    streaming: StreamingSettings = StreamingSettings()


settings = Settings()
