"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


DEFAULT_SYSTEM_PROMPT = (
    "You are GOSH-MIND, a helpful AI assistant. Provide clear, concise, and helpful "
    "responses to user questions. Be friendly and conversational while maintaining "
    "professionalism."
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App info
    app_name: str = "GOSH-MIND"
    app_version: str = "1.0.0"
    debug: bool = False

    # Upstream provider
    upstream_strategy: str = "completion"  # "completion" (chat/completions) or "assistant" (threads/runs)
    openai_api_key: Optional[str] = None
    openai_assistant_id: Optional[str] = None  # required only for the assistant strategy
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_timeout: float = 60.0
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Assistant run polling
    poll_interval: float = 1.0  # seconds between run status checks
    max_poll_attempts: int = 60

    # Requests
    max_message_length: int = 2000  # counted in UTF-16 code units, like the browser client

    # Static client bundle (mounted at "/" when set and present)
    static_dir: Optional[str] = None

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5000",
        "http://localhost:5173",
        "http://127.0.0.1:5000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/gosh_mind.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses
    log_llm_calls: bool = True  # Log upstream calls with token usage


settings = Settings()
