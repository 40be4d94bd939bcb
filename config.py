"""Configuration and environment settings"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application configuration"""

    # LLM Configuration
    GOOGLE_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    )
    OPENAI_API_KEY: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None

    # Which engine answers the report request (gemini, openai, anthropic)
    LLM_PROVIDER: str = "gemini"

    # LLM Model Selection
    GEMINI_MODEL_ID: str = "gemini-2.5-flash"
    OPENAI_MODEL: str = "gpt-4o"
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"

    # LLM Settings
    LLM_MAX_TOKENS: int = 8192
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_RETRIES: int = 1  # 1 = single attempt, no retry wrapper
    LLM_RETRY_DELAY: float = 2.0  # seconds
    LLM_TIMEOUT: float = 120.0  # seconds

    # Payload budget (characters of serialized sheet data sent to the engine)
    MAX_PAYLOAD_CHARS: int = 500_000

    # Analysis rules
    CHART_ESTIMATION_ENABLED: bool = False
    UTILIZATION_BOTTLENECK_THRESHOLD: float = 0.85

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
