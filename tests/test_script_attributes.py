"""Tests for ScriptAttributeBuilder."""

import re

import pytest

from plausible_wp.models.commerce import RequestContext
from plausible_wp.models.settings import PluginSettings
from plausible_wp.services.script_attributes import ScriptAttributeBuilder


@pytest.fixture
def builder(proxy):
    return ScriptAttributeBuilder(proxy)


def test_base_attributes(builder):
    params = builder.build(PluginSettings(domain_name="example.org"))

    assert params == (
        "defer data-domain='example.org' data-api='https://plausible.io/api/event' data-cfasync='false'"
    )


def test_domain_falls_back_to_site_url(builder):
    assert "data-domain='example.org'" in builder.build(PluginSettings())


def test_excluded_pages(builder):
    params = builder.build(PluginSettings(excluded_pages="/cart*, /checkout"))

    assert params.endswith("data-exclude='/cart*, /checkout'")


def test_proxied_api_url(builder):
    params = builder.build(PluginSettings(proxy_enabled=True))

    assert re.search(r"data-api='http://example\.org/wp-json/[a-z0-9]{6}/v1/[a-z0-9]{4}/[a-z0-9]{8}'", params)


def test_pageview_properties_for_single_item(builder):
    context = RequestContext(
        is_singular=True,
        author_name="Jane Doe",
        terms={"category": ["News", "Releases"], "post_tag": ["wordpress"]},
    )

    params = builder.build(PluginSettings(enhanced_measurements=["pageview-props"]), context)

    assert params.endswith(
        " event-author='Jane Doe' event-category='News' event-category='Releases' event-post_tag='wordpress'"
    )


def test_pageview_properties_need_the_feature(builder):
    context = RequestContext(is_singular=True, author_name="Jane Doe", terms={"category": ["News"]})

    assert "event-" not in builder.build(PluginSettings(), context)


def test_pageview_properties_need_a_single_item(builder):
    context = RequestContext(is_singular=False, author_name="Jane Doe")

    params = builder.build(PluginSettings(enhanced_measurements=["pageview-props"]), context)

    assert "event-author" not in params


def test_term_names_are_sanitized(builder):
    context = RequestContext(is_singular=True, terms={"category": ["<b>Tom's</b> picks"]})

    params = builder.build(PluginSettings(enhanced_measurements=["pageview-props"]), context)

    assert "event-category='Tom&#x27;s picks'" in params


def test_add_attributes_rewrites_our_tag(builder):
    tag = builder.add_attributes(
        '<script id="plausible-analytics-js" src="test.js"></script>',
        "plausible-analytics",
        PluginSettings(domain_name="example.org"),
    )

    assert 'id="plausible"' in tag
    assert "plausible-analytics-js" not in tag
    assert "plausible.io/api/event" in tag
    assert tag.index("data-domain") < tag.index(" src=")


def test_add_attributes_ignores_other_handles(builder):
    tag = '<script id="jquery-js" src="jquery.js"></script>'

    assert builder.add_attributes(tag, "jquery", PluginSettings()) == tag
