"""
Payment-related settings using pydantic-settings v2 with nested env keys.

This module is isolated so core.config.Settings stays about the app itself.
Credentials are read once at process start; components receive the
`TranzakSettings` object at construction instead of looking up env vars.
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field


class PaymentTimeouts(BaseModel):
    connect: float = 5.0
    read: float = 15.0
    write: float = 15.0
    total: float = 30.0


class WebhookSettings(BaseModel):
    signature_header: str = "X-Tranzak-Signature"


class TranzakSettings(BaseModel):
    app_id: Optional[str] = None
    api_key: Optional[str] = None
    webhook_secret: Optional[str] = None
    base_url: str = "https://api.tranzak.net"
    request_path: str = "/v1/request"
    currency_code: str = "XAF"
    country_code: str = "+237"

    def missing_credentials(self) -> list[str]:
        """Names of the charge credentials that are not configured."""
        missing = []
        if not self.app_id:
            missing.append("TRANZAK__APP_ID")
        if not self.api_key:
            missing.append("TRANZAK__API_KEY")
        return missing

    def missing_webhook_secret(self) -> bool:
        return not self.webhook_secret

    @property
    def request_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.request_path.lstrip('/')}"


class PaymentSettings(BaseSettings):
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    tranzak: TranzakSettings = Field(default_factory=TranzakSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()
