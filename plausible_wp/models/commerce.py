"""Read-only commerce records handed over by the host store."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProductSnapshot(BaseModel):
    id: int
    name: str
    price: Optional[float] = None
    tax_class: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class CartItemSnapshot(BaseModel):
    key: str
    product_id: int
    variation_id: int = 0
    quantity: int = 1
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def as_dict(self) -> dict[str, Any]:
        return {
            **self.data,
            "key": self.key,
            "product_id": self.product_id,
            "variation_id": self.variation_id,
            "quantity": self.quantity,
        }


class CartSnapshot(BaseModel):
    items: List[CartItemSnapshot] = Field(default_factory=list)
    subtotal: float = 0
    shipping_total: float = 0
    total_tax: float = 0
    total: str = "0.00"

    model_config = {"frozen": True}

    def find(self, key: str) -> CartItemSnapshot | None:
        return next((item for item in self.items if item.key == key), None)


class OrderSnapshot(BaseModel):
    id: int
    total: float
    currency: str
    transaction_id: str = ""

    model_config = {"frozen": True}


class RequestContext(BaseModel):
    """What the page being rendered is about."""

    is_singular: bool = False
    author_name: Optional[str] = None
    terms: Dict[str, List[str]] = Field(default_factory=dict)
