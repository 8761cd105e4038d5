"""Tests for the goal catalog."""

import pytest

from plausible_wp.models.goals import CustomEventGoal, PageviewGoal, RevenueGoal
from plausible_wp.services import catalog


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Purchase (USD)", "Purchase"),
        ("Woo Complete Purchase (EUR)", "Woo Complete Purchase"),
        ("404", "404"),
        ("Outbound Link: Click", "Outbound Link: Click"),
    ],
)
def test_strip_currency_suffix(name, expected):
    assert catalog.strip_currency_suffix(name) == expected


def test_measurement_lookup_by_display_name():
    assert catalog.measurement_for_goal_name("File Download") == "file-downloads"
    assert catalog.measurement_for_goal_name("WP Search Queries (USD)") == "search"
    assert catalog.measurement_for_goal_name("Unrelated") is None


def test_commerce_lookup_uses_containment():
    assert catalog.commerce_event_for_goal_name("Woo Complete Purchase (EUR)") == "purchase"
    assert catalog.commerce_event_for_goal_name("Visit /product*") == "view-product"
    assert catalog.commerce_event_for_goal_name("404") is None


def test_definitions_build_matching_requests():
    assert catalog.COMMERCE_EVENT_GOALS["view-product"].to_request() == PageviewGoal(path="/product*")
    assert catalog.COMMERCE_EVENT_GOALS["add-to-cart"].to_request() == CustomEventGoal(event_name="Woo Add to Cart")
    assert catalog.COMMERCE_EVENT_GOALS["purchase"].to_request("EUR") == RevenueGoal(
        event_name="Woo Complete Purchase", currency="EUR"
    )


def test_revenue_goal_requires_currency():
    with pytest.raises(ValueError):
        catalog.COMMERCE_EVENT_GOALS["purchase"].to_request()


def test_unique_keeps_first_occurrence():
    assert catalog.unique(["a", "b", "a", "c"]) == ["a", "b", "c"]
