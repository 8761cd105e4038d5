"""Utility helpers for rendering attribute values."""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup


def strip_html(value: str | None) -> str | None:
    if not value:
        return None
    soup = BeautifulSoup(value, "html.parser")
    text = soup.get_text(" ", strip=True)
    return re.sub(r"\s+", " ", text).strip() if text else None


def attribute_value(value: str | None) -> str:
    """Plain text safe to place inside a single-quoted HTML attribute."""
    return html.escape(strip_html(value) or "", quote=True)
