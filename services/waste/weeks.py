# services/waste/weeks.py
from __future__ import annotations

import math
from datetime import date, datetime, timedelta

import pytz


def week_number(d: date) -> int:
    """
    ISO-8601 week number (1..53) of `d`.

    Shift the date to the Thursday of its Monday-Sunday week, then count
    weeks from 1 January of that Thursday's year. Agrees with
    `date.isocalendar()[1]`.
    """
    if isinstance(d, datetime):
        d = d.date()
    thursday = d + timedelta(days=4 - d.isoweekday())
    year_start = date(thursday.year, 1, 1)
    return math.ceil(((thursday - year_start).days + 1) / 7)


def week_monday(d: date) -> date:
    """Monday of the ISO week containing `d`."""
    if isinstance(d, datetime):
        d = d.date()
    return d - timedelta(days=d.weekday())


def local_today(tz_name: str = "Europe/Prague") -> date:
    """Today's wall-clock date in `tz_name`."""
    return datetime.now(pytz.timezone(tz_name)).date()
