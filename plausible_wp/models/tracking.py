"""Pydantic models for emitted tracking events."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Destination(str, Enum):
    INLINE = "inline"
    PROXIED = "proxied"


class Revenue(BaseModel):
    amount: str
    currency: str


class TrackedEvent(BaseModel):
    label: str
    props: Dict[str, Any] = Field(default_factory=dict)
    revenue: Optional[Revenue] = None

    def payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.revenue is not None:
            body["revenue"] = self.revenue.model_dump()
        if self.props:
            body["props"] = self.props
        return body
