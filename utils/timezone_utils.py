"""
Timezone utilities for the occupancy rollover.
Every "day" is a calendar day in the reference timezone (America/Sao_Paulo
unless configured otherwise); persisted instants are naive UTC.
"""

import re
import pytz
from datetime import datetime, date, time, timedelta


DEFAULT_TIMEZONE = 'America/Sao_Paulo'
REFERENCE_TZ = pytz.timezone(DEFAULT_TIMEZONE)
DATE_FORMAT = re.compile(r'\d{4}-\d{2}-\d{2}')


def get_timezone(name=None):
    """Return a pytz timezone, falling back to the reference zone."""
    if name is None:
        return REFERENCE_TZ
    if isinstance(name, str):
        return pytz.timezone(name)
    return name


def get_local_now(tz=None):
    """Get current datetime in the reference timezone."""
    return datetime.now(get_timezone(tz))


def parse_date(value):
    """
    Accept a ``yyyy-mm-dd`` string or a date and return a date.

    Raises:
        ValueError: if the string is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_FORMAT.fullmatch(value):
        raise ValueError(f"expected a yyyy-mm-dd date, got {value!r}")
    return datetime.strptime(value, '%Y-%m-%d').date()


def start_of_local_day(day, tz=None):
    """
    Aware datetime for 00:00 of ``day`` in ``tz``.

    When midnight does not exist (DST starting at 00:00, as Brazil used to do)
    the result is normalized to the first valid instant of that day.
    """
    tz = get_timezone(tz)
    naive = datetime.combine(parse_date(day), time.min)
    return tz.normalize(tz.localize(naive, is_dst=False))


def local_day_window(day, tz=None):
    """
    Return (start, end) of the local calendar day as naive UTC datetimes.

    ``end`` is the last millisecond before the next local midnight, so a
    23 or 25 hour day around a DST change is covered in full.
    """
    day = parse_date(day)
    start = start_of_local_day(day, tz)
    next_start = start_of_local_day(day + timedelta(days=1), tz)
    end = next_start - timedelta(milliseconds=1)
    return (
        start.astimezone(pytz.utc).replace(tzinfo=None),
        end.astimezone(pytz.utc).replace(tzinfo=None),
    )


def next_local_midnight(now, tz=None):
    """First local midnight strictly after ``now``."""
    tz = get_timezone(tz)
    local_now = now.astimezone(tz)
    return start_of_local_day(local_now.date() + timedelta(days=1), tz)


def previous_local_date(now, tz=None):
    """Calendar date of the local day before ``now``."""
    local_now = now.astimezone(get_timezone(tz))
    return local_now.date() - timedelta(days=1)
