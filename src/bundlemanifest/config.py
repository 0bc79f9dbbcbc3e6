"""Reader settings loaded from environment variables."""
from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReaderSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BUNDLE_MANIFEST_")

    max_string_length: int = Field(default=4096, ge=1, description="Longest accepted bundle id / relative path, in bytes")
    max_embedded_files: int = Field(default=65536, ge=1, description="Largest accepted file count in the fixed header")
    log_level: str = Field(default="WARNING", description="Logging level used by the CLI")


@lru_cache
def get_settings() -> ReaderSettings:
    return ReaderSettings()
