"""Routes the tracking script and event beacons through the site's own domain."""

from __future__ import annotations

import logging
from typing import Any

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import Settings
from ..models.settings import PluginSettings
from ..models.tracking import TrackedEvent
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_HOST = "plausible.io"


class Proxy:
    def __init__(self, config: Settings, store: SettingsStore, session: requests.Session | None = None):
        self._config = config
        self._store = store
        self.session = session or requests.Session()

    def get_remote_host(self, settings: PluginSettings) -> str:
        return settings.self_hosted_domain or DEFAULT_HOST

    def get_rest_endpoint(self) -> str:
        resources = self._store.get_proxy_resources()
        site_url = str(self._config.site_url).rstrip("/")
        return f"{site_url}/wp-json/{resources['namespace']}/v1/{resources['base']}/{resources['endpoint']}"

    def get_data_api_url(self, settings: PluginSettings) -> str:
        if settings.proxy_enabled:
            return self.get_rest_endpoint()
        return f"https://{self.get_remote_host(settings)}/api/event"

    def get_js_url(self, settings: PluginSettings) -> str:
        return f"https://{self.get_remote_host(settings)}/js/plausible.js"

    def get_domain(self, settings: PluginSettings) -> str:
        return settings.domain_name or self._config.site_domain

    def do_request(
        self,
        event: TrackedEvent,
        settings: PluginSettings,
        *,
        url: str | None = None,
        referrer: str | None = None,
        user_agent: str | None = None,
        client_ip: str | None = None,
    ) -> bool:
        """Forward one event to the collector. Never raises."""
        body: dict[str, Any] = {
            "name": event.label,
            "domain": self.get_domain(settings),
            "url": url or str(self._config.site_url),
            **event.payload(),
        }
        if referrer:
            body["referrer"] = referrer

        headers = {"Content-Type": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        if client_ip:
            headers["X-Forwarded-For"] = client_ip

        endpoint = f"https://{self.get_remote_host(settings)}/api/event"
        try:
            response = self.session.post(endpoint, json=body, headers=headers, timeout=self._config.http_timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Forwarding event '%s' failed: %s", event.label, exc)
            return False
        return True

    def fetch_script(self, settings: PluginSettings) -> str:
        return self._download(self.get_js_url(settings))

    @retry(
        retry=retry_if_exception_type(requests.RequestException),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    def _download(self, url: str) -> str:
        response = self.session.get(url, timeout=self._config.http_timeout)
        response.raise_for_status()
        return response.text
