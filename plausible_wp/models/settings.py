"""Pydantic models for the plugin's settings option."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

EnhancedMeasurement = Literal[
    "404",
    "outbound-links",
    "file-downloads",
    "search",
    "revenue",
    "pageview-props",
]


class PluginSettings(BaseModel):
    """Snapshot of the `plausible_analytics_settings` option.

    Unknown keys are kept so a round trip through the store never loses
    options this service does not interpret.
    """

    domain_name: str = ""
    api_token: str = ""
    enhanced_measurements: List[str] = Field(default_factory=list)
    enable_analytics_dashboard: bool = False
    excluded_pages: str = ""
    shared_link: str = ""
    proxy_enabled: bool = False
    self_hosted_domain: str = ""

    model_config = {
        "extra": "allow",
    }

    @field_validator("enhanced_measurements", mode="before")
    @classmethod
    def _drop_blank_measurements(cls, value):
        if value is None:
            return []
        if isinstance(value, (set, frozenset)):
            value = sorted(value)
        return [str(item) for item in value if item]

    def is_enabled(self, measurement: str) -> bool:
        return measurement in self.enhanced_measurements


class PluginSettingsUpdate(BaseModel):
    domain_name: Optional[str] = None
    api_token: Optional[str] = None
    enhanced_measurements: Optional[List[EnhancedMeasurement]] = None
    enable_analytics_dashboard: Optional[bool] = None
    excluded_pages: Optional[str] = None
    proxy_enabled: Optional[bool] = None
    self_hosted_domain: Optional[str] = None
