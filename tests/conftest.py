"""Shared fixtures: in-memory database, fake API client and fake HTTP session."""

from __future__ import annotations

import itertools

import pytest
import requests
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from plausible_wp.config import Settings
from plausible_wp.db.base import Base
from plausible_wp.models.goals import (
    Funnel,
    FunnelStep,
    Goal,
    PageviewGoal,
    RevenueGoal,
    SharedLink,
)
from plausible_wp.services.client import ApiError, RemoteUnavailable
from plausible_wp.services.emitter import EventEmitter
from plausible_wp.services.proxy import Proxy
from plausible_wp.services.settings_store import OrderMetaStore, SettingsStore


class FakeClient:
    """Records every call; answers like the remote get-or-create API."""

    def __init__(self, ids: dict[str, int] | None = None):
        self.ids = dict(ids or {})
        self.calls: list[tuple[str, object]] = []
        self.token_valid = True
        self.unavailable = False
        self.failing_deletes: set[int] = set()
        self.failing: set[str] = set()
        self.dropped: set[str] = set()
        self._sequence = itertools.count(1000)

    def _record(self, name: str, payload: object) -> None:
        self.calls.append((name, payload))
        if name in self.failing:
            raise ApiError(f"{name} failed", status_code=500)

    def calls_to(self, name: str) -> list[object]:
        return [payload for call, payload in self.calls if call == name]

    def validate_token(self) -> bool:
        self.calls.append(("validate_token", None))
        if self.unavailable:
            raise RemoteUnavailable("connection refused")
        return self.token_valid

    def _goal(self, request) -> Goal:
        if isinstance(request, PageviewGoal):
            name = f"Visit {request.path}"
        elif isinstance(request, RevenueGoal):
            name = f"{request.event_name} ({request.currency})"
        else:
            name = request.event_name
        goal_id = self.ids.setdefault(name, next(self._sequence))
        return Goal(id=goal_id, display_name=name, goal_type=request.goal_type)

    def create_goals(self, goals):
        self._record("create_goals", list(goals))
        created = [self._goal(goal) for goal in goals]
        return [goal for goal in created if goal.display_name not in self.dropped]

    def delete_goal(self, goal_id: int) -> None:
        self._record("delete_goal", goal_id)
        if goal_id in self.failing_deletes:
            raise ApiError("delete failed", status_code=500)

    def create_funnel(self, funnel):
        self._record("create_funnel", funnel)
        steps = [FunnelStep(step_order=i, goal=self._goal(step)) for i, step in enumerate(funnel.steps, start=1)]
        return Funnel(id=1, name=funnel.name, steps=steps)

    def enable_custom_properties(self, keys):
        self._record("enable_custom_properties", list(keys))

    def create_shared_link(self, name: str = "WordPress - Shared Dashboard"):
        self._record("create_shared_link", name)
        return SharedLink(id="test", name="Test", href="http://example.org/test")


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", json_data=None):
        self.status_code = status_code
        self.text = text
        self._json = json_data
        self.content = text.encode() if text else b""

    def json(self):
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self):
        self.posted: list[dict] = []
        self.fetched: list[str] = []
        self.post_error: Exception | None = None
        self.get_responses: list[object] = []
        self.headers: dict[str, str] = {}

    def post(self, url, json=None, headers=None, timeout=None):
        self.posted.append({"url": url, "json": json, "headers": headers})
        if self.post_error is not None:
            raise self.post_error
        return FakeResponse(202, "ok")

    def get(self, url, timeout=None):
        self.fetched.append(url)
        response = self.get_responses.pop(0) if self.get_responses else FakeResponse(200, "/* script */")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
    engine.dispose()


@pytest.fixture
def config() -> Settings:
    return Settings(
        site_url="http://example.org",
        site_locale="en_US",
        api_token="test-token",
        store_currency="EUR",
        woocommerce_active=True,
    )


@pytest.fixture
def store(session_factory) -> SettingsStore:
    return SettingsStore(session_factory=session_factory)


@pytest.fixture
def order_meta(session_factory) -> OrderMetaStore:
    return OrderMetaStore(session_factory=session_factory)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def http_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def proxy(config, store, http_session) -> Proxy:
    return Proxy(config, store, session=http_session)


@pytest.fixture
def emitter(proxy, order_meta) -> EventEmitter:
    return EventEmitter(proxy, order_meta, locale="en_US")
