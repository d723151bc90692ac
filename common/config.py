"""
Configuration management using Pydantic Settings.

Environment variables (prefix ``SUNVIEW_``):
- SUNVIEW_SOURCE: catalog source, ``github`` or ``local``
- SUNVIEW_REPO / SUNVIEW_BRANCH / SUNVIEW_MODELS_PATH: where the models live
- SUNVIEW_API_BASE_URL / SUNVIEW_RAW_BASE_URL: GitHub (or mock server) endpoints
- SUNVIEW_LOCAL_DIR: directory of model documents for the local source
- SUNVIEW_REQUEST_TIMEOUT: HTTP timeout in seconds
- SUNVIEW_MAX_CONCURRENCY: simultaneous document fetches while indexing
- SUNVIEW_LOG_LEVEL / SUNVIEW_LOG_FILE: logging
"""
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="SUNVIEW_", extra="ignore")

    # Catalog source
    source: Literal["github", "local"] = "github"
    repo: str = Field(default="sunspec/models", description="owner/name of the models repository")
    branch: str = "master"
    models_path: str = "json"
    api_base_url: str = "https://api.github.com"
    raw_base_url: str = "https://raw.githubusercontent.com"
    local_dir: Optional[str] = None

    # HTTP
    request_timeout: float = Field(default=10.0, gt=0)
    max_concurrency: int = Field(default=16, ge=1)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
