"""Keeps remote goals, funnels and custom properties in step with plugin settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from ..models.goals import FunnelRequest, Goal
from ..models.settings import PluginSettings
from . import catalog
from .client import ApiError, RemoteAnalyticsClient
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProvisioningResult:
    skipped: str | None = None
    shared_link: str | None = None
    created: dict[int, str] = field(default_factory=dict)
    deleted: list[int] = field(default_factory=list)
    custom_properties: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.skipped is None and not self.errors


class ProvisioningReconciler:
    """Diffs old vs. new settings and issues the matching API calls.

    Runs after the settings were persisted, so no failure here may undo the
    save: API errors are logged and recorded per operation, never raised.
    Creation runs before deletion so a single on/off transition cannot
    delete a goal it has just re-created.
    """

    def __init__(
        self,
        client: RemoteAnalyticsClient | None,
        store: SettingsStore,
        *,
        commerce_active: bool = False,
        currency: str = "USD",
    ):
        self._client = client
        self._store = store
        self._commerce_active = commerce_active
        self._currency = currency

    def on_settings_changed(self, old: PluginSettings, new: PluginSettings) -> ProvisioningResult:
        result = ProvisioningResult()

        if self._client is None:
            logger.info("Provisioning skipped: no API token configured")
            result.skipped = "missing_prerequisite"
            return result

        try:
            valid = self._client.validate_token()
        except ApiError as exc:
            logger.warning("Provisioning skipped: token validation failed: %s", exc)
            result.skipped = "remote_unavailable"
            return result

        if not valid:
            logger.warning("Provisioning skipped: API token was rejected")
            result.skipped = "invalid_token"
            return result

        operations: list[tuple[str, Callable[[PluginSettings, PluginSettings, ProvisioningResult], None]]] = [
            ("shared_link", self.create_shared_link),
            ("goals", self.create_goals),
            ("commerce_funnel", self.create_commerce_funnel),
            ("delete_goals", self.delete_goals),
            ("delete_commerce_goals", self.delete_commerce_goals),
            ("custom_properties", self.enable_custom_properties),
        ]
        for name, operation in operations:
            try:
                operation(old, new, result)
            except ApiError as exc:
                logger.warning("Provisioning step '%s' failed: %s", name, exc)
                result.errors[name] = str(exc)

        return result

    def create_shared_link(self, old: PluginSettings, new: PluginSettings, result: ProvisioningResult) -> None:
        if not new.enable_analytics_dashboard:
            return
        if old.enable_analytics_dashboard and new.shared_link:
            return

        shared_link = self._client.create_shared_link()
        self._store.update_setting("shared_link", shared_link.href)
        result.shared_link = shared_link.href

    def create_goals(self, old: PluginSettings, new: PluginSettings, result: ProvisioningResult) -> None:
        requests = []
        for measurement in new.enhanced_measurements:
            definition = catalog.goal_for(measurement)
            if definition is not None:
                requests.append(definition.to_request())

        if not requests:
            return

        self._remember(self._client.create_goals(requests), result)

    def create_commerce_funnel(self, old: PluginSettings, new: PluginSettings, result: ProvisioningResult) -> None:
        if not new.is_enabled("revenue") or not self._commerce_active:
            return

        steps = []
        for event_key, definition in catalog.COMMERCE_EVENT_GOALS.items():
            if event_key in catalog.STANDALONE_COMMERCE_GOALS:
                try:
                    self._remember(self._client.create_goals([definition.to_request()]), result)
                except ApiError as exc:
                    logger.warning("Could not create goal '%s': %s", definition.display_name, exc)
                    result.errors["commerce_goals"] = str(exc)
                continue
            steps.append(definition.to_request(currency=self._currency))

        funnel = self._client.create_funnel(FunnelRequest(name=catalog.COMMERCE_FUNNEL_NAME, steps=steps))
        self._remember((step.goal for step in funnel.steps if step.goal is not None), result)

    def delete_goals(self, old: PluginSettings, new: PluginSettings, result: ProvisioningResult) -> None:
        disabled = {m for m in old.enhanced_measurements if m not in new.enhanced_measurements}
        if not disabled:
            return

        self._forget(lambda name: catalog.measurement_for_goal_name(name) in disabled, result)

    def delete_commerce_goals(self, old: PluginSettings, new: PluginSettings, result: ProvisioningResult) -> None:
        if not old.is_enabled("revenue") or new.is_enabled("revenue"):
            return

        self._forget(lambda name: catalog.commerce_event_for_goal_name(name) is not None, result)

    def enable_custom_properties(self, old: PluginSettings, new: PluginSettings, result: ProvisioningResult) -> None:
        properties: list[str] = []
        if new.is_enabled("pageview-props"):
            properties.extend(catalog.PAGEVIEW_PROPERTIES)
        if new.is_enabled("revenue") and self._commerce_active:
            properties.extend(catalog.COMMERCE_PROPERTIES)
        if new.is_enabled("search"):
            properties.extend(catalog.SEARCH_PROPERTIES)

        properties = catalog.unique(properties)
        if not properties:
            return

        self._client.enable_custom_properties(properties)
        result.custom_properties = properties

    def _remember(self, goals: Iterable[Goal], result: ProvisioningResult) -> None:
        returned = {goal.id: goal.display_name for goal in goals}
        if not returned:
            return

        ids = self._store.get_goal_ids()
        ids.update(returned)
        self._store.set_goal_ids(ids)
        result.created.update(returned)

    def _forget(self, matches: Callable[[str], bool], result: ProvisioningResult) -> None:
        ids = self._store.get_goal_ids()
        remaining = dict(ids)
        failure: ApiError | None = None

        for goal_id, name in ids.items():
            if not matches(name):
                continue
            try:
                self._client.delete_goal(goal_id)
            except ApiError as exc:
                logger.warning("Could not delete goal %s (%s): %s", goal_id, name, exc)
                failure = exc
                continue
            del remaining[goal_id]
            result.deleted.append(goal_id)

        if remaining != ids:
            self._store.set_goal_ids(remaining)
        if failure is not None:
            raise failure
