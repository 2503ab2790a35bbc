"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where uploaded record sets live on disk."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    user_files_dir: str = "user_files"


class RateSettings(BaseSettings):
    """CoinGecko price lookup settings.

    All fields configurable via RATES_ environment variable prefix.
    A cache TTL of 0 disables the rate cache entirely.
    """

    model_config = SettingsConfigDict(env_prefix="RATES_")

    base_url: str = "https://api.coingecko.com/api/v3"
    vs_currency: str = "eur"  # reference currency for every valuation
    timeout_seconds: float = 10.0
    cache_ttl_seconds: float = 0.0
    api_key: SecretStr = SecretStr("")


class ApiSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8080
    max_upload_bytes: int = 5 * 1024 * 1024


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    storage: StorageSettings = StorageSettings()
    rates: RateSettings = RateSettings()
    api: ApiSettings = ApiSettings()
