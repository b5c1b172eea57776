from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STRONGTYPES_", env_file=".env", extra="ignore")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Generation
    ALLOW_UNCHECKED: bool = True  # Global kill switch for `new_unchecked` constructors

    # Error rendering
    REDACTION_PLACEHOLDER: str = "[REDACTED]"
    MAX_ECHO_LENGTH: int = 50  # Offending values longer than this are truncated in messages


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
