"""Synchronous dispatcher bridging host hooks to the services."""

from __future__ import annotations

import logging
from typing import Any

from ..services.provisioning import ProvisioningReconciler
from ..services.script_attributes import ScriptAttributeBuilder
from ..services.settings_store import SettingsStore
from ..services.woocommerce import WooCommerce
from . import (
    CartItemAdded,
    CartItemRemoved,
    CheckoutRendered,
    Event,
    OrderCompleted,
    ScriptTagRendering,
    SettingsChanged,
)

logger = logging.getLogger(__name__)


class DispatchError(ValueError):
    pass


class EventDispatcher:
    def __init__(
        self,
        *,
        store: SettingsStore,
        reconciler: ProvisioningReconciler,
        script_builder: ScriptAttributeBuilder,
        woocommerce: WooCommerce | None = None,
    ):
        self._store = store
        self._reconciler = reconciler
        self._script_builder = script_builder
        self._woocommerce = woocommerce

    def dispatch(self, event: Event) -> Any:
        if isinstance(event, SettingsChanged):
            return self._reconciler.on_settings_changed(event.old, event.new)

        settings = self._store.get()

        if isinstance(event, ScriptTagRendering):
            return self._script_builder.add_attributes(event.tag, event.handle, settings, event.context)

        if isinstance(event, (CartItemAdded, CartItemRemoved, CheckoutRendered, OrderCompleted)):
            return self._dispatch_commerce(event, settings)

        raise DispatchError(f"Unsupported event '{type(event).__name__}'")

    def _dispatch_commerce(self, event: Event, settings) -> Any:
        # Commerce tracking only runs while revenue tracking is on and the store is present.
        if self._woocommerce is None or not settings.is_enabled("revenue"):
            logger.debug("Ignoring %s: commerce tracking inactive", type(event).__name__)
            return None

        if isinstance(event, CartItemAdded):
            return self._woocommerce.track_add_to_cart(
                event.product, event.added, event.cart, settings=settings, referrer=event.referrer
            )
        if isinstance(event, CartItemRemoved):
            return self._woocommerce.track_remove_cart_item(
                event.item_key, event.cart, settings=settings, referrer=event.referrer
            )
        if isinstance(event, CheckoutRendered):
            return self._woocommerce.track_entered_checkout(event.cart, settings=settings, is_checkout=event.is_checkout)
        return self._woocommerce.track_purchase(event.order, settings=settings)
