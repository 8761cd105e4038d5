"""Persistence for plugin settings, the goal ID cache and order meta."""

from __future__ import annotations

import secrets
import string
from typing import Any, Callable, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import OptionRow, OrderMetaRow
from ..models.settings import PluginSettings

SETTINGS_OPTION = "plausible_analytics_settings"
GOAL_IDS_OPTION = "plausible_analytics_enhanced_measurements_goal_ids"
PROXY_RESOURCES_OPTION = "plausible_analytics_proxy_resources"


def _random_slug(length: int) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


class SettingsStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self) -> PluginSettings:
        return PluginSettings.model_validate(self._get_option(SETTINGS_OPTION) or {})

    def update(self, changes: Mapping[str, Any]) -> tuple[PluginSettings, PluginSettings]:
        """Merge `changes` into the stored settings and return (old, new)."""
        session = self._session_factory()
        try:
            row = session.execute(
                select(OptionRow).where(OptionRow.name == SETTINGS_OPTION).with_for_update()
            ).scalar_one_or_none()
            if row is None:
                row = OptionRow(name=SETTINGS_OPTION, value={})
                session.add(row)

            old = PluginSettings.model_validate(row.value or {})
            new = PluginSettings.model_validate({**old.model_dump(), **dict(changes)})
            row.value = new.model_dump()
            session.commit()
            return old, new
        finally:
            session.close()

    def update_setting(self, key: str, value: Any) -> PluginSettings:
        """Write a single key without producing a settings-changed pair."""
        current = self.get().model_dump()
        current[key] = value
        self._set_option(SETTINGS_OPTION, current)
        return PluginSettings.model_validate(current)

    def get_goal_ids(self) -> dict[int, str]:
        stored = self._get_option(GOAL_IDS_OPTION) or {}
        return {int(goal_id): name for goal_id, name in stored.items()}

    def set_goal_ids(self, ids: Mapping[int, str]) -> None:
        self._set_option(GOAL_IDS_OPTION, {str(goal_id): name for goal_id, name in ids.items()})

    def get_proxy_resources(self) -> dict[str, str]:
        """Random REST route segments for the proxy, generated once per install."""
        resources = self._get_option(PROXY_RESOURCES_OPTION)
        if resources:
            return resources

        resources = {
            "namespace": _random_slug(6),
            "base": _random_slug(4),
            "endpoint": _random_slug(8),
        }
        self._set_option(PROXY_RESOURCES_OPTION, resources)
        return resources

    def _get_option(self, name: str) -> Any:
        session = self._session_factory()
        try:
            row = session.get(OptionRow, name)
            return row.value if row is not None else None
        finally:
            session.close()

    def _set_option(self, name: str, value: Any) -> None:
        session = self._session_factory()
        try:
            session.merge(OptionRow(name=name, value=value))
            session.commit()
        finally:
            session.close()


class OrderMetaStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, order_id: int, key: str) -> Any:
        session = self._session_factory()
        try:
            row = session.execute(
                select(OrderMetaRow).where(
                    OrderMetaRow.order_id == order_id,
                    OrderMetaRow.meta_key == key,
                )
            ).scalar_one_or_none()
            return row.meta_value if row is not None else None
        finally:
            session.close()

    def set(self, order_id: int, key: str, value: Any) -> None:
        session = self._session_factory()
        try:
            row = session.execute(
                select(OrderMetaRow).where(
                    OrderMetaRow.order_id == order_id,
                    OrderMetaRow.meta_key == key,
                )
            ).scalar_one_or_none()
            if row is None:
                row = OrderMetaRow(order_id=order_id, meta_key=key)
                session.add(row)
            row.meta_value = value
            session.commit()
        finally:
            session.close()
