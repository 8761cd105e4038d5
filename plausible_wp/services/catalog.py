"""Goal catalog for enhanced measurements and the WooCommerce funnel."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Literal

from ..models.goals import CustomEventGoal, PageviewGoal, RevenueGoal

GoalKind = Literal["CustomEvent", "Pageview", "Revenue"]

_CURRENCY_SUFFIX = re.compile(r" \([A-Z]*?\)")


@dataclass(frozen=True, slots=True)
class GoalDefinition:
    display_name: str
    kind: GoalKind = "CustomEvent"
    path: str | None = None

    def to_request(self, currency: str | None = None) -> CustomEventGoal | PageviewGoal | RevenueGoal:
        if self.kind == "Pageview":
            return PageviewGoal(path=self.path or "/")
        if self.kind == "Revenue":
            if not currency:
                raise ValueError(f"Revenue goal '{self.display_name}' requires a currency")
            return RevenueGoal(event_name=self.display_name, currency=currency)
        return CustomEventGoal(event_name=self.display_name)


ENHANCED_MEASUREMENT_GOALS: dict[str, GoalDefinition] = {
    "404": GoalDefinition("404"),
    "outbound-links": GoalDefinition("Outbound Link: Click"),
    "file-downloads": GoalDefinition("File Download"),
    "search": GoalDefinition("WP Search Queries"),
}

# Order is the funnel order.
COMMERCE_EVENT_GOALS: dict[str, GoalDefinition] = {
    "view-product": GoalDefinition("Visit /product*", kind="Pageview", path="/product*"),
    "add-to-cart": GoalDefinition("Woo Add to Cart"),
    "remove-from-cart": GoalDefinition("Woo Remove from Cart"),
    "checkout": GoalDefinition("Woo Start Checkout"),
    "purchase": GoalDefinition("Woo Complete Purchase", kind="Revenue"),
}

# Provisioned on its own, outside the funnel.
STANDALONE_COMMERCE_GOALS = frozenset({"remove-from-cart"})

COMMERCE_FUNNEL_NAME = "Woo Purchase Funnel"

PAGEVIEW_PROPERTIES = ("author", "category")
SEARCH_PROPERTIES = ("search_query", "result_count")
COMMERCE_PROPERTIES = (
    "cart_total",
    "cart_total_items",
    "id",
    "name",
    "price",
    "product_id",
    "product_name",
    "quantity",
    "shipping",
    "subtotal",
    "subtotal_tax",
    "tax_class",
    "total",
    "total_tax",
    "variation_id",
)


def goal_for(measurement: str) -> GoalDefinition | None:
    return ENHANCED_MEASUREMENT_GOALS.get(measurement)


def commerce_label(event_key: str) -> str:
    return COMMERCE_EVENT_GOALS[event_key].display_name


def strip_currency_suffix(name: str) -> str:
    """Drop the " (USD)"-style suffix the API appends to revenue goal names."""
    return _CURRENCY_SUFFIX.sub("", name)


def measurement_for_goal_name(name: str) -> str | None:
    stripped = strip_currency_suffix(name)
    for key, definition in ENHANCED_MEASUREMENT_GOALS.items():
        if definition.display_name == stripped:
            return key
    return None


def commerce_event_for_goal_name(name: str) -> str | None:
    # Containment, not equality: the API may decorate names, e.g. "Woo Complete Purchase (EUR)".
    for key, definition in COMMERCE_EVENT_GOALS.items():
        if definition.display_name in name:
            return key
    return None


def unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))
