"""Builds the attributes of the injected tracking script tag."""

from __future__ import annotations

import html
import re

from ..models.commerce import RequestContext
from ..models.settings import PluginSettings
from ..utils.text import attribute_value
from .proxy import Proxy

SCRIPT_HANDLE = "plausible-analytics"

_SCRIPT_ID = re.compile(r"""\sid=(['"])plausible-analytics-js(['"])""")


class ScriptAttributeBuilder:
    def __init__(self, proxy: Proxy):
        self._proxy = proxy

    def build(self, settings: PluginSettings, context: RequestContext | None = None) -> str:
        domain = html.escape(self._proxy.get_domain(settings))
        api_url = html.escape(self._proxy.get_data_api_url(settings))
        # data-cfasync keeps Cloudflare Rocket Loader away from the script.
        params = f"defer data-domain='{domain}' data-api='{api_url}' data-cfasync='false'"

        if settings.excluded_pages:
            params += f" data-exclude='{html.escape(settings.excluded_pages)}'"

        return params + self.pageview_properties(settings, context)

    def pageview_properties(self, settings: PluginSettings, context: RequestContext | None) -> str:
        if not settings.is_enabled("pageview-props") or context is None or not context.is_singular:
            return ""

        params = ""
        if context.author_name:
            params += f" event-author='{attribute_value(context.author_name)}'"

        # One attribute per term, even when a taxonomy has several.
        for taxonomy, terms in context.terms.items():
            for term in terms:
                if term:
                    params += f" event-{taxonomy}='{attribute_value(term)}'"
        return params

    def add_attributes(
        self,
        tag: str,
        handle: str,
        settings: PluginSettings,
        context: RequestContext | None = None,
    ) -> str:
        if handle != SCRIPT_HANDLE:
            return tag

        # The script must be addressable as #plausible.
        tag = _SCRIPT_ID.sub(r" id=\1plausible\2", tag)
        params = self.build(settings, context)
        return tag.replace(" src", f" {params} src", 1)
