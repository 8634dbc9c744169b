"""Timestamp normalization, relative windows, and ISO week labels."""

from __future__ import annotations

from datetime import datetime, timedelta

import pandas as pd
import pytz

from linear_app.core.config import DEFAULT_TIME_WINDOW_DAYS, TIME_WINDOW_DAYS


def to_utc(value) -> pd.Timestamp | None:
    """Normalize a timestamp-like value to a UTC ``pd.Timestamp``.

    Naive values are taken to be UTC. Returns None when the input is empty or
    cannot be parsed.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    try:
        if getattr(ts, "tzinfo", None) is None:
            ts = ts.tz_localize(pytz.UTC)
        return ts.tz_convert(pytz.UTC)
    except (TypeError, ValueError):
        return None


def utc_now() -> datetime:
    return datetime.now(tz=pytz.UTC)


def window_start(window: str, now: datetime | None = None) -> pd.Timestamp:
    """Start of a relative window such as "7d", counted back from ``now``."""
    days = TIME_WINDOW_DAYS.get(window, DEFAULT_TIME_WINDOW_DAYS)
    reference = to_utc(now) if now is not None else to_utc(utc_now())
    return reference - timedelta(days=days)


def iso_week_label(value) -> str | None:
    """ISO-8601 week label ``"{iso year}-W{week:02d}"`` for a timestamp.

    Weeks start on Monday and week 1 holds the year's first Thursday, so
    2024-01-01 is ``2024-W01`` and 2023-12-31 is ``2023-W52``. The ISO year is
    used so labels sort lexicographically in time order.

    Examples
    --------
    >>> iso_week_label("2024-01-03T12:00:00Z")
    '2024-W01'
    """
    ts = to_utc(value)
    if ts is None:
        return None
    year, week, _ = ts.isocalendar()
    return f"{year}-W{week:02d}"
