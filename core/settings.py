"""
Paynow settings using pydantic-settings v2 with nested env keys.

Every field can be supplied through the environment (or `.env`) with the
``PAYNOW_`` prefix, e.g. ``PAYNOW_INTEGRATION_ID`` or ``PAYNOW_TIMEOUTS__READ``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, SecretStr


DEFAULT_INITIATE_URL = "https://www.paynow.co.zw/interface/remotetransaction"


class PaymentTimeouts(BaseModel):
    connect: float = 1.0
    read: float = 10.0
    write: float = 10.0
    total: float = 15.0


class PollSettings(BaseModel):
    interval_seconds: float = 5.0
    max_attempts: int = 60


class PaynowSettings(BaseSettings):
    integration_id: str = ""
    integration_key: SecretStr = SecretStr("")
    result_url: str = ""
    return_url: str = ""
    initiate_url: str = DEFAULT_INITIATE_URL

    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)
    poll: PollSettings = Field(default_factory=PollSettings)

    debug: bool = False
    log_level: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="PAYNOW_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )


@lru_cache
def get_paynow_settings() -> PaynowSettings:
    return PaynowSettings()
