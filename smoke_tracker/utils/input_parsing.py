"""Parsing of free-text answers collected by the bot."""

from __future__ import annotations

import datetime as dt

DATETIME_FORMAT = "%Y-%m-%d %H:%M"
TIME_FORMAT = "%H:%M"


def parse_event_time(text: str, now: dt.datetime) -> dt.datetime:
    """Turn ``now``, ``HH:MM`` or ``YYYY-MM-DD HH:MM`` into an aware datetime.

    Times are read in the time zone of ``now``. A bare ``HH:MM`` later than
    ``now`` means the same time yesterday. Raises ValueError for anything
    unparseable or in the future.
    """
    text = text.strip().lower()
    if text in ("", "now"):
        return now

    try:
        when = dt.datetime.strptime(text, DATETIME_FORMAT).replace(tzinfo=now.tzinfo)
    except ValueError:
        try:
            clock = dt.datetime.strptime(text, TIME_FORMAT).time()
        except ValueError:
            raise ValueError("expected HH:MM or YYYY-MM-DD HH:MM") from None
        when = dt.datetime.combine(now.date(), clock, tzinfo=now.tzinfo)
        if when > now:
            when -= dt.timedelta(days=1)

    if when > now:
        raise ValueError("time is in the future")
    return when
