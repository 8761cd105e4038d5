"""Script tag, tracking script, commerce hook and event proxy endpoints."""

from __future__ import annotations

from typing import Any

import requests
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from ..events import (
    CartItemAdded,
    CartItemRemoved,
    CheckoutRendered,
    OrderCompleted,
    ScriptTagRendering,
)
from ..events.dispatcher import EventDispatcher
from ..models.commerce import CartSnapshot, OrderSnapshot, ProductSnapshot, RequestContext
from ..models.tracking import Revenue, TrackedEvent
from ..services.proxy import Proxy
from ..services.settings_store import SettingsStore
from .deps import dispatcher, proxy, settings_store

r = APIRouter(tags=["tracking"])


class ScriptTagRequest(BaseModel):
    tag: str
    handle: str = "plausible-analytics"
    context: RequestContext | None = None


class AddToCartRequest(BaseModel):
    product: ProductSnapshot
    cart: CartSnapshot
    added: dict[str, Any] = Field(default_factory=dict)
    referrer: str | None = None


class RemoveFromCartRequest(BaseModel):
    cart: CartSnapshot
    referrer: str | None = None


class CheckoutRequest(BaseModel):
    cart: CartSnapshot
    is_checkout: bool = True


class ProxiedEventRequest(BaseModel):
    name: str
    url: str | None = None
    referrer: str | None = None
    props: dict[str, Any] = Field(default_factory=dict)
    revenue: Revenue | None = None


@r.post("/script-tag")
def render_script_tag(payload: ScriptTagRequest, events: EventDispatcher = Depends(dispatcher)):
    tag = events.dispatch(ScriptTagRendering(tag=payload.tag, handle=payload.handle, context=payload.context))
    return {"tag": tag}


@r.post("/woocommerce/cart/items")
def cart_item_added(payload: AddToCartRequest, events: EventDispatcher = Depends(dispatcher)):
    tracked = events.dispatch(
        CartItemAdded(product=payload.product, cart=payload.cart, added=payload.added, referrer=payload.referrer)
    )
    return {"tracked": bool(tracked)}


@r.post("/woocommerce/cart/items/{item_key}/remove")
def cart_item_removed(item_key: str, payload: RemoveFromCartRequest, events: EventDispatcher = Depends(dispatcher)):
    tracked = events.dispatch(CartItemRemoved(item_key=item_key, cart=payload.cart, referrer=payload.referrer))
    return {"tracked": bool(tracked)}


@r.post("/woocommerce/checkout")
def checkout_rendered(payload: CheckoutRequest, events: EventDispatcher = Depends(dispatcher)):
    return {"script": events.dispatch(CheckoutRendered(cart=payload.cart, is_checkout=payload.is_checkout))}


@r.post("/woocommerce/orders/thankyou")
def order_completed(order: OrderSnapshot, events: EventDispatcher = Depends(dispatcher)):
    return {"script": events.dispatch(OrderCompleted(order=order))}


@r.get("/js/plausible.js")
def tracking_script(forwarder: Proxy = Depends(proxy), store: SettingsStore = Depends(settings_store)):
    try:
        script = forwarder.fetch_script(store.get())
    except requests.RequestException as exc:
        raise HTTPException(status_code=502, detail="Tracking script unavailable") from exc
    return Response(content=script, media_type="application/javascript")


@r.post("/api/event", status_code=status.HTTP_202_ACCEPTED)
def forward_event(
    payload: ProxiedEventRequest,
    request: Request,
    forwarder: Proxy = Depends(proxy),
    store: SettingsStore = Depends(settings_store),
):
    event = TrackedEvent(label=payload.name, props=payload.props, revenue=payload.revenue)
    forwarded = forwarder.do_request(
        event,
        store.get(),
        url=payload.url,
        referrer=payload.referrer,
        user_agent=request.headers.get("user-agent"),
        client_ip=request.client.host if request.client else None,
    )
    return {"ok": forwarded}
