"""
Configuration management using pydantic-settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dinasty.constants import DEFAULT_HORIZON, MAX_HORIZON
from dinasty.models import NetworkType


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: NetworkType = NetworkType.MAINNET

    # Derivation indices scanned per single-path descriptor
    horizon: int = Field(default=DEFAULT_HORIZON, ge=1, le=MAX_HORIZON)

    # stdout carries command output, keep stderr quiet by default
    log_level: str = "WARNING"


def get_settings() -> Settings:
    return Settings()
