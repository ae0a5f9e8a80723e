"""Weir normalises source-control webhooks into canonical events."""

from __future__ import annotations

__all__: list[str] = []
