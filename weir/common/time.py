"""Common time utilities."""

from __future__ import annotations

import datetime as dt


def unix_seconds(value: dt.datetime | None) -> int:
    """Return ``value`` as whole unix seconds in UTC.

    Naive datetimes are taken to already be UTC. ``None`` maps to ``0``.
    """
    if value is None:
        return 0
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.UTC)
    return int(value.astimezone(dt.UTC).timestamp())
