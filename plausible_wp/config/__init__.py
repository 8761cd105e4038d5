"""Configuration helpers for the connector."""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import AnyUrl, BaseModel, Field


class Settings(BaseModel):
    """Runtime configuration sourced from env vars or `.env`."""

    app_name: str = Field(default="plausible-wp-connector")
    database_url: str = Field(default="sqlite:///plausible.db", alias="DATABASE_URL")
    site_url: AnyUrl = Field(default="http://example.org", alias="SITE_URL", validate_default=True)
    site_locale: str = Field(default="en_US", alias="SITE_LOCALE")
    api_token: str | None = Field(default=None, alias="PLAUSIBLE_API_TOKEN")
    api_url: str = Field(default="https://plausible.io", alias="PLAUSIBLE_API_URL")
    store_currency: str = Field(default="USD", alias="STORE_CURRENCY")
    woocommerce_active: bool = Field(default=False, alias="WOOCOMMERCE_ACTIVE")
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")

    model_config = {
        "populate_by_name": True,
    }

    @property
    def site_domain(self) -> str:
        return self.site_url.host or ""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings.model_validate(dict(os.environ))
