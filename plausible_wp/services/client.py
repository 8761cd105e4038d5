"""Plausible Sites API client."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Protocol, Sequence

import requests

from ..config import Settings
from ..models.goals import Funnel, FunnelRequest, Goal, GoalRequest, SharedLink

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """The API answered, but not with a success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteUnavailable(ApiError):
    """The API could not be reached at all."""


class InvalidTokenError(ApiError):
    """The API rejected the configured token."""


class MalformedResponse(ApiError):
    """The API answered with a success status but an unreadable body."""


@contextmanager
def _reading(what: str) -> Iterator[None]:
    try:
        yield
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise MalformedResponse(f"Unexpected {what} response: {exc}") from exc


class RemoteAnalyticsClient(Protocol):
    def validate_token(self) -> bool:
        ...

    def create_goals(self, goals: Sequence[GoalRequest]) -> list[Goal]:
        ...

    def delete_goal(self, goal_id: int) -> None:
        ...

    def create_funnel(self, funnel: FunnelRequest) -> Funnel:
        ...

    def enable_custom_properties(self, keys: Iterable[str]) -> None:
        ...

    def create_shared_link(self, name: str = ...) -> SharedLink:
        ...


class PlausibleClient:
    API_PATH = "api/plugins/v1"

    def __init__(self, *, base_url: str, token: str, domain: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.domain = domain
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def validate_token(self) -> bool:
        try:
            self._request("GET", "capabilities")
        except InvalidTokenError:
            return False
        return True

    def create_goals(self, goals: Sequence[GoalRequest]) -> list[Goal]:
        data = self._request("PUT", "goals", json={"goals": [goal.to_payload() for goal in goals]})
        with _reading("goals"):
            return [Goal.from_payload(item) for item in data.get("goals") or []]

    def delete_goal(self, goal_id: int) -> None:
        self._request("DELETE", f"goals/{goal_id}")

    def create_funnel(self, funnel: FunnelRequest) -> Funnel:
        data = self._request("PUT", "funnels", json=funnel.to_payload())
        with _reading("funnel"):
            return Funnel.from_payload(data)

    def enable_custom_properties(self, keys: Iterable[str]) -> None:
        payload = {"custom_props": [{"custom_prop": {"key": key}} for key in keys]}
        self._request("PUT", "custom_props", json=payload)

    def create_shared_link(self, name: str = "WordPress - Shared Dashboard") -> SharedLink:
        data = self._request("PUT", "shared_links", json={"shared_link": {"name": name}})
        with _reading("shared link"):
            return SharedLink.from_payload(data)

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}/{self.API_PATH}/{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteUnavailable(f"{method} {url} failed: {exc}") from exc

        if response.status_code == 401:
            raise InvalidTokenError("API token rejected", status_code=401)
        if response.status_code >= 400:
            logger.error("Plausible API error %s on %s %s: %s", response.status_code, method, path, response.text)
            raise ApiError(f"{method} {path} returned {response.status_code}", status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return {}
        with _reading(f"{method} {path}"):
            return response.json()


def build_client(config: Settings, token: str | None = None) -> PlausibleClient | None:
    """Return a client, or None when no API token is configured."""
    token = token or config.api_token
    if not token:
        return None
    return PlausibleClient(
        base_url=config.api_url,
        token=token,
        domain=config.site_domain,
        timeout=config.http_timeout,
    )
