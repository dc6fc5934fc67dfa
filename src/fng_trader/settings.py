from __future__ import annotations

import logging

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fng_trader.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Coinbase Advanced Trade
    # `key` / `secret` are the legacy serverless variable names.
    coinbase_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("COINBASE_API_KEY", "key"),
    )
    coinbase_api_secret: str = Field(
        default="",
        validation_alias=AliasChoices("COINBASE_API_SECRET", "secret"),
    )
    coinbase_base_url: str = Field(
        default="https://api.coinbase.com",
        validation_alias="COINBASE_BASE_URL",
    )
    coinbase_order_path: str = Field(
        default="/api/v3/brokerage/orders",
        validation_alias="COINBASE_ORDER_PATH",
    )

    # Sentiment index
    fear_greed_url: str = Field(
        default="https://api.alternative.me/fng/",
        validation_alias="FEAR_GREED_URL",
    )

    # HTTP
    http_timeout_seconds: float = Field(default=5.0, gt=0, validation_alias="HTTP_TIMEOUT_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    def has_credentials(self) -> bool:
        return bool(self.coinbase_api_key.strip() and self.coinbase_api_secret.strip())

    def redacted(self) -> dict[str, object]:
        data = self.model_dump()
        data["coinbase_api_secret"] = "***" if data["coinbase_api_secret"] else ""
        return data


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"invalid settings: {e}") from e
