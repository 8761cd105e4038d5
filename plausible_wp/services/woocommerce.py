"""WooCommerce tracking: cart, checkout and purchase events."""

from __future__ import annotations

from typing import Any, Mapping

from ..config import Settings
from ..models.commerce import CartSnapshot, OrderSnapshot, ProductSnapshot
from ..models.settings import PluginSettings
from ..models.tracking import Destination
from . import catalog
from .emitter import EventEmitter, filter_props

CUSTOM_PROPERTIES = catalog.COMMERCE_PROPERTIES


def is_active(config: Settings) -> bool:
    return config.woocommerce_active


class WooCommerce:
    """Maps store events onto tracking calls.

    Cart changes happen in AJAX/Store API requests with no page to render
    into, so they are forwarded through the proxy. Checkout and purchase
    happen on rendered pages and produce inline script blocks instead.
    """

    def __init__(self, emitter: EventEmitter):
        self._emitter = emitter
        self.event_goals = {key: definition.display_name for key, definition in catalog.COMMERCE_EVENT_GOALS.items()}

    def track_add_to_cart(
        self,
        product: ProductSnapshot,
        added: Mapping[str, Any],
        cart: CartSnapshot,
        *,
        settings: PluginSettings,
        referrer: str | None = None,
    ) -> bool:
        product_data = filter_props(
            {**product.data, "id": product.id, "name": product.name, "price": product.price, "tax_class": product.tax_class},
            CUSTOM_PROPERTIES,
        )
        added = filter_props(added, CUSTOM_PROPERTIES)
        props = {
            "product_name": product_data.get("name"),
            "product_id": added.get("id", product.id),
            "quantity": added.get("quantity", 1),
            "price": product_data.get("price"),
            "tax_class": product_data.get("tax_class"),
            "cart_total_items": len(cart.items),
            "cart_total": cart.total,
        }
        return self._emitter.emit(
            self.event_goals["add-to-cart"],
            props,
            Destination.PROXIED,
            settings=settings,
            url=referrer,
        )

    def track_remove_cart_item(
        self,
        item_key: str,
        cart: CartSnapshot,
        *,
        settings: PluginSettings,
        referrer: str | None = None,
    ) -> bool:
        item = cart.find(item_key)
        removed = filter_props(item.as_dict(), CUSTOM_PROPERTIES) if item is not None else {}
        props = {
            "product_id": removed.get("product_id"),
            "variation_id": removed.get("variation_id"),
            "quantity": removed.get("quantity"),
            "removed_item": removed,
            "cart_total_items": len(cart.items),
            "cart_total": cart.total,
        }
        return self._emitter.emit(
            self.event_goals["remove-from-cart"],
            props,
            Destination.PROXIED,
            settings=settings,
            url=referrer,
        )

    def track_entered_checkout(self, cart: CartSnapshot, *, settings: PluginSettings, is_checkout: bool = True) -> str | None:
        if not is_checkout:
            return None

        props = {
            "subtotal": cart.subtotal,
            "shipping": cart.shipping_total,
            "tax": cart.total_tax,
            "total": cart.total,
        }
        return self._emitter.emit(self.event_goals["checkout"], props, Destination.INLINE, settings=settings)

    def track_purchase(self, order: OrderSnapshot, *, settings: PluginSettings) -> str | None:
        return self._emitter.emit_purchase(self.event_goals["purchase"], order, settings=settings)
