from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RULECHAIN_", env_file=".env", extra="ignore")

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False  # True for JSON lines, False for colored console output

    # Engine
    MAX_DEPTH: int = Field(default=64, ge=1)  # nested validate() calls allowed per top-level call


@lru_cache
def get_settings() -> Settings:
    return Settings()
