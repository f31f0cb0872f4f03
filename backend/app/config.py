"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    geovisual_env: str = "development"
    geovisual_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Model routing
    model_cheap: str = "claude-haiku-4-5-20251001"
    model_mid: str = "claude-sonnet-4-5-20250929"
    model_frontier: str = "claude-sonnet-4-5-20250929"
    # Single-image flows run cheap; multi-image detection on mid
    flow_model_tiers: dict[str, str] = {
        "vegetation": "cheap",
        "soil": "cheap",
        "infrastructure": "mid",
        "proximity": "cheap",
    }

    # Generation
    llm_max_tokens: int = 4096
    llm_temperature: float = 0.2

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
