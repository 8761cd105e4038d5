"""Turns tracking events into inline script calls or proxied beacons."""

from __future__ import annotations

import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from ..models.commerce import OrderSnapshot
from ..models.settings import PluginSettings
from ..models.tracking import Destination, Revenue, TrackedEvent
from .proxy import Proxy
from .settings_store import OrderMetaStore

logger = logging.getLogger(__name__)

PURCHASE_TRACKED_META_KEY = "_plausible_analytics_purchase_tracked"

SCRIPT_WRAPPER = (
    '<script defer id="plausible-analytics-integration-tracking">'
    'document.addEventListener("DOMContentLoaded", () => {{ {} }});'
    "</script>"
)

# (thousands separator, decimal point), as in the host's locale files.
NUMBER_FORMATS: dict[str, tuple[str, str]] = {
    "en": (",", "."),
    "ja": (",", "."),
    "zh": (",", "."),
    "de": (".", ","),
    "de_CH": ("'", "."),
    "nl": (".", ","),
    "es": (".", ","),
    "it": (".", ","),
    "pt": (".", ","),
    "da": (".", ","),
    "fr": (" ", ","),
    "sv": (" ", ","),
    "pl": (" ", ","),
    "ru": (" ", ","),
    "cs": (" ", ","),
}


def number_format(locale: str | None) -> tuple[str, str]:
    locale = (locale or "en_US").replace("-", "_")
    if locale in NUMBER_FORMATS:
        return NUMBER_FORMATS[locale]
    return NUMBER_FORMATS.get(locale.split("_")[0], NUMBER_FORMATS["en"])


def format_amount(value: Any, locale: str | None = None) -> str:
    """Format `value` with two decimals and the locale's separators."""
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc

    thousands, decimal_point = number_format(locale)
    formatted = f"{amount:,.2f}"
    return formatted.replace(",", "\0").replace(".", decimal_point).replace("\0", thousands)


def filter_props(props: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """Keep allow-listed keys only; nested mappings are filtered the same way."""
    allowed = set(allowed)
    filtered: dict[str, Any] = {}
    for key, value in props.items():
        if key not in allowed:
            continue
        if isinstance(value, Mapping):
            value = filter_props(value, allowed)
        filtered[key] = value
    return filtered


def render_inline(event: TrackedEvent) -> str:
    payload = json.dumps(event.payload(), separators=(",", ":")).replace("</", "<\\/")
    call = f"window.plausible({json.dumps(event.label)}, {payload})"
    return SCRIPT_WRAPPER.format(call)


class EventEmitter:
    def __init__(self, proxy: Proxy, order_meta: OrderMetaStore, *, locale: str = "en_US"):
        self._proxy = proxy
        self._order_meta = order_meta
        self._locale = locale

    def emit(
        self,
        label: str,
        props: Mapping[str, Any] | None,
        destination: Destination,
        *,
        settings: PluginSettings,
        allowed: Iterable[str] | None = None,
        revenue: Revenue | None = None,
        url: str | None = None,
        referrer: str | None = None,
    ) -> str | bool:
        """Inline events return their `<script>` block, proxied events whether forwarding succeeded."""
        props = dict(props or {})
        if allowed is not None:
            props = filter_props(props, allowed)
        event = TrackedEvent(label=label, props=props, revenue=revenue)

        if destination is Destination.INLINE:
            return render_inline(event)

        logger.debug("Forwarding '%s' through the proxy", label)
        return self._proxy.do_request(event, settings, url=url, referrer=referrer)

    def emit_purchase(self, label: str, order: OrderSnapshot, *, settings: PluginSettings) -> str | None:
        if self._order_meta.get(order.id, PURCHASE_TRACKED_META_KEY):
            logger.debug("Purchase for order %s already tracked", order.id)
            return None

        props = {"transaction_id": order.transaction_id} if order.transaction_id else None
        revenue = Revenue(amount=format_amount(order.total, self._locale), currency=order.currency)
        script = self.emit(label, props, Destination.INLINE, settings=settings, revenue=revenue)

        self._order_meta.set(order.id, PURCHASE_TRACKED_META_KEY, True)
        return script
