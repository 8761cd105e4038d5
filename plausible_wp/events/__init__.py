"""Explicit event types, one per host hook this service reacts to."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..models.commerce import CartSnapshot, OrderSnapshot, ProductSnapshot, RequestContext
from ..models.settings import PluginSettings


@dataclass(slots=True, frozen=True)
class SettingsChanged:
    old: PluginSettings
    new: PluginSettings


@dataclass(slots=True, frozen=True)
class CartItemAdded:
    product: ProductSnapshot
    cart: CartSnapshot
    added: dict[str, Any] = field(default_factory=dict)
    referrer: str | None = None


@dataclass(slots=True, frozen=True)
class CartItemRemoved:
    item_key: str
    cart: CartSnapshot
    referrer: str | None = None


@dataclass(slots=True, frozen=True)
class CheckoutRendered:
    cart: CartSnapshot
    is_checkout: bool = True


@dataclass(slots=True, frozen=True)
class OrderCompleted:
    order: OrderSnapshot


@dataclass(slots=True, frozen=True)
class ScriptTagRendering:
    tag: str
    handle: str
    context: RequestContext | None = None


Event = SettingsChanged | CartItemAdded | CartItemRemoved | CheckoutRendered | OrderCompleted | ScriptTagRendering

__all__ = [
    "CartItemAdded",
    "CartItemRemoved",
    "CheckoutRendered",
    "Event",
    "OrderCompleted",
    "ScriptTagRendering",
    "SettingsChanged",
]
