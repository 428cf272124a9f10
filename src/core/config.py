"""
Application configuration via pydantic-settings.

Loads values from .env file with placeholder defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"


class Settings(BaseSettings):
    """TranscriptChat application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        stt_provider: Which speech-to-text backend to use ("azure").
        llm_provider: Which chat backend to use ("azure", "claude" or "ollama").
        request_timeout: Upper bound in seconds for every upstream AI call.
        history_path: JSON file holding the UI's transcription history.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Speech-to-text ---
    stt_provider: str = "azure"
    transcription_endpoint: str = (
        "https://YOUR_RESOURCE_NAME.openai.azure.com/openai/deployments/whisper"
        "/audio/translations?api-version=2024-06-01"
    )
    transcription_api_key: str = PLACEHOLDER_API_KEY

    # --- Chat ---
    # Selects the chat backend: "azure" for a chat-completions endpoint,
    # "claude" for Anthropic API, "ollama" for local models
    llm_provider: str = "azure"
    chat_endpoint: str = (
        "https://YOUR_RESOURCE_NAME.openai.azure.com/openai/deployments/gpt-4o-mini"
        "/chat/completions?api-version=2025-01-01-preview"
    )
    chat_api_key: str = PLACEHOLDER_API_KEY
    chat_max_tokens: int = 1000
    chat_temperature: float = 0.7

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Relay limits ---
    request_timeout: float = 30.0  # Seconds, applies to every upstream call
    max_upload_mb: int = 50
    upload_dir: str = "uploads"  # Temporary spool dir, files removed after each call

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = Field(default=3000, validation_alias=AliasChoices("app_port", "port"))
    log_level: str = "INFO"  # Python logging level
    ui_url: str = "http://localhost:8501"  # Streamlit UI, linked from the fallback page

    # --- UI ---
    api_base_url: str = "http://localhost:3000"
    history_path: str = "data/history.json"
    history_limit: int = 10

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
