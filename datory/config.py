"""Library settings loaded from environment / .env file."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="DATORY_", extra="ignore"
    )

    # Schema derivation
    VARCHAR_DEFAULT_LENGTH: int = 500


settings = Settings()
