from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Validation
    SCHEMATA_UNKNOWN_KEYS: Literal["strip", "strict", "passthrough"] = "strip"

    APP_DEBUG: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return not self.APP_DEBUG


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
