"""FastAPI application factory."""

from __future__ import annotations

from typing import Callable

from fastapi import FastAPI
from sqlalchemy.orm import Session

from .api.settings import r as settings_router
from .api.tracking import r as tracking_router
from .config import Settings, get_settings
from .db.base import Base
from .events.dispatcher import EventDispatcher
from .services import woocommerce
from .services.client import RemoteAnalyticsClient, build_client
from .services.emitter import EventEmitter
from .services.provisioning import ProvisioningReconciler
from .services.proxy import Proxy
from .services.script_attributes import ScriptAttributeBuilder
from .services.settings_store import OrderMetaStore, SettingsStore


def create_app(
    config: Settings | None = None,
    session_factory: Callable[[], Session] | None = None,
    client: RemoteAnalyticsClient | None = None,
) -> FastAPI:
    config = config or get_settings()
    if session_factory is None:
        from .db.session import SessionFactory, engine

        Base.metadata.create_all(bind=engine)
        session_factory = SessionFactory

    store = SettingsStore(session_factory=session_factory)
    proxy = Proxy(config, store)
    emitter = EventEmitter(proxy, OrderMetaStore(session_factory=session_factory), locale=config.site_locale)
    commerce_active = woocommerce.is_active(config)
    reconciler = ProvisioningReconciler(
        client if client is not None else build_client(config),
        store,
        commerce_active=commerce_active,
        currency=config.store_currency,
    )

    app = FastAPI(title=config.app_name)
    app.state.settings_store = store
    app.state.proxy = proxy
    app.state.dispatcher = EventDispatcher(
        store=store,
        reconciler=reconciler,
        script_builder=ScriptAttributeBuilder(proxy),
        woocommerce=woocommerce.WooCommerce(emitter) if commerce_active else None,
    )
    app.include_router(settings_router)
    app.include_router(tracking_router)
    return app
