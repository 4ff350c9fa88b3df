"""Configuration management using pydantic-settings."""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Claude LLM configuration (summaries, classification fallback, fixtures)
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-3-haiku-20240307"
    anthropic_max_tokens: int = 1500

    # TheSportsDB configuration (team verification / official fields)
    # "3" is TheSportsDB's public test key
    sportsdb_api_key: Optional[str] = None
    sportsdb_base_url: str = "https://www.thesportsdb.com/api/v1/json"

    # YouTube Data API configuration (highlight videos)
    youtube_api_key: Optional[str] = None
    youtube_base_url: str = "https://www.googleapis.com/youtube/v3"
    video_max_attempts: int = 3

    # Timeouts (seconds) for every outbound adapter call
    adapter_timeout_seconds: float = 8.0
    classifier_timeout_seconds: float = 5.0

    # Minimum length of the analysis narrative returned to the UI
    min_analysis_length: int = 160

    # Cache settings
    cache_enabled: bool = True
    coalesce_timeout_seconds: float = 30.0
    cache_max_entries: int = 1000

    # Seed for the locally generated World Cup fixtures
    fallback_fixtures_seed: int = 2026

    # Query logging (JSONL of notable searches)
    search_logging: bool = False
    log_directory: Path = Path("./logs")

    default_language: str = "en"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
