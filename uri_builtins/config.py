"""Service settings, read from ``URI_BUILTINS_*`` environment variables or ``.env``."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "URI Builtins"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    # Builtin operands are single URIs or component records; 0 disables the limit.
    max_request_body_bytes: int = 65_536

    model_config = SettingsConfigDict(
        env_prefix="URI_BUILTINS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
