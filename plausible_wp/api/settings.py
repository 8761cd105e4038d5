"""Plugin settings endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from ..events import SettingsChanged
from ..events.dispatcher import EventDispatcher
from ..models.settings import PluginSettings, PluginSettingsUpdate
from ..services.settings_store import SettingsStore
from .deps import dispatcher, settings_store

r = APIRouter(prefix="/settings", tags=["settings"])


@r.get("", response_model=PluginSettings)
def fetch_settings(store: SettingsStore = Depends(settings_store)):
    return store.get()


@r.put("")
def update_settings(
    payload: PluginSettingsUpdate,
    store: SettingsStore = Depends(settings_store),
    events: EventDispatcher = Depends(dispatcher),
):
    old, new = store.update(payload.model_dump(exclude_none=True))
    result = events.dispatch(SettingsChanged(old=old, new=new))
    return {"settings": store.get().model_dump(), "provisioning": asdict(result)}
