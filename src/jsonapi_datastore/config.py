from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store settings loaded from environment variables with JSONAPI_DATASTORE_ prefix."""

    # Validate documents against the JSON:API envelope models before ingesting
    strict: bool = False
    # Store.sync returns a SyncResult instead of the bare primary data
    top_level: bool = False

    model_config = SettingsConfigDict(env_prefix="JSONAPI_DATASTORE_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Return cached store settings instance."""
    return Settings()
