from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings

from .secrets import load_secret_as_text, should_use_secret_manager

logger = logging.getLogger("vision-relay.config")

DEFAULT_MODEL = "google/gemini-2.0-flash-lite-preview-02-05:free"
DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"


class Settings(BaseSettings):
    app_name: str = "vision-relay"

    # Comma separated list of caller tokens
    allowed_api_keys: str = ""

    openrouter_api_key: str = ""
    openrouter_endpoint: str = DEFAULT_ENDPOINT
    # Optional attribution headers for OpenRouter rankings
    openrouter_referer: Optional[str] = None
    openrouter_title: Optional[str] = None

    default_model: str = DEFAULT_MODEL
    request_timeout_seconds: int = 90
    max_upload_bytes: int = Field(
        default=20 * 1024 * 1024,
        ge=1,
        description="Upper bound for a single attachment. Can be overridden by MAX_UPLOAD_BYTES.",
    )

    # Secret Manager configuration
    gcp_project_id: Optional[str] = None
    secret_allowed_keys_name: str = "relay-allowed-api-keys"
    secret_openrouter_key_name: str = "openrouter-api-key"

    class Config:
        env_file = ".env"

    def get_allowed_api_keys(self) -> List[str]:
        """Parse the allow-list, dropping blanks."""
        return [key.strip() for key in self.allowed_api_keys.split(",") if key.strip()]

    @validator("openrouter_endpoint")
    def _default_endpoint(cls, value: str) -> str:
        # OPENROUTER_ENDPOINT="" falls back to the public endpoint
        return value.strip() or DEFAULT_ENDPOINT

    @validator("default_model")
    def _default_model(cls, value: str) -> str:
        return value.strip() or DEFAULT_MODEL


def _load_from_secret_manager(settings: Settings) -> Settings:
    project_id = settings.gcp_project_id or os.environ.get("GCP_PROJECT_ID")
    updates = {}
    if not settings.allowed_api_keys:
        logger.info("Loading allowed_api_keys from Secret Manager")
        try:
            updates["allowed_api_keys"] = load_secret_as_text(settings.secret_allowed_keys_name, project_id)
        except Exception as e:
            logger.error(f"Failed to load allowed_api_keys from Secret Manager: {e}")
            raise
    if not settings.openrouter_api_key:
        logger.info("Loading openrouter_api_key from Secret Manager")
        try:
            updates["openrouter_api_key"] = load_secret_as_text(settings.secret_openrouter_key_name, project_id)
        except Exception as e:
            logger.error(f"Failed to load openrouter_api_key from Secret Manager: {e}")
            raise
    if not updates:
        return settings
    return settings.model_copy(update=updates)


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    if should_use_secret_manager():
        settings = _load_from_secret_manager(settings)
    if not settings.get_allowed_api_keys():
        logger.warning("ALLOWED_API_KEYS is empty; every request will be rejected")
    return settings
