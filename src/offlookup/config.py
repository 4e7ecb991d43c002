"""Service settings, read from the environment (or a local ``.env`` file)."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    Every field maps to the upper-cased environment variable of the same
    name, e.g. ``MONGODB_URI`` or ``COLLECTION_NAME``.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3006
    mongodb_uri: str = "mongodb://localhost:27017"
    database_name: str = "off"
    collection_name: str = "products"
    #: Fail fast on startup when MongoDB cannot be selected within this time.
    mongodb_timeout_ms: int = 5000
    search_default_limit: int = 10
    search_max_limit: int = 100
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
