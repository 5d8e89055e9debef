"""
Date resolution for finporter.

Three shapes of date show up in the inputs:

1. Canonical ISO-8601 values in tabular documents ("2021-03-01T17:00:00Z",
   or a bare "2020-12-31" which resolves to midnight UTC).
2. "Naked" vendor dates ("07/16/2021", sometimes "07/16/2021 as of
   07/15/2021") with no time of day and no zone. These are resolved by
   applying a default time of day (noon unless told otherwise) in a
   caller-supplied zone, or in the process-local zone when none is given.
3. Vendor banner timestamps ("09:59 PM ET, 09/26/2021") carrying a US
   zone abbreviation.

Like the number parsers, nothing here raises on bad input: an
unresolvable value comes back as ``None``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo

_NAKED_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})(?:\s+as of\s+.*)?$")
_TIME_OF_DAY_RE = re.compile(r"^(\d{2}):(\d{2})$")
_BANNER_RE = re.compile(
    r"^(\d{1,2}):(\d{2})\s*(AM|PM)\s+([A-Z]{2,4}),\s*(\d{1,2})/(\d{1,2})/(\d{4})$",
    re.IGNORECASE,
)

# US zone abbreviations used by brokerage banners
_ZONE_ABBREVIATIONS = {
    "ET": "America/New_York",
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "CT": "America/Chicago",
    "CST": "America/Chicago",
    "CDT": "America/Chicago",
    "MT": "America/Denver",
    "MST": "America/Denver",
    "MDT": "America/Denver",
    "PT": "America/Los_Angeles",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
}


def parse_time_of_day(value: str) -> time | None:
    """Parse an ``HH:MM`` time of day (exactly five characters)."""
    match = _TIME_OF_DAY_RE.match(value)
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def _localize(moment: datetime, zone: tzinfo | None) -> datetime:
    if zone is None:
        # Naive datetimes are local time; astimezone() attaches the local offset
        return moment.astimezone()
    return moment.replace(tzinfo=zone)


def parse_naked_date(
    raw: str | None,
    time_of_day: str = "12:00",
    zone: tzinfo | None = None,
) -> datetime | None:
    """Resolve a vendor ``MM/DD/YYYY`` date to an aware datetime.

    Args:
        raw: Cell text. A trailing ``as of MM/DD/YYYY`` is ignored.
        time_of_day: Default ``HH:MM`` applied to the date.
        zone: Zone the date is expressed in; ``None`` for process-local.

    Returns:
        The aware datetime, or ``None`` if the date or the default
        time of day cannot be resolved.
    """
    if raw is None:
        return None
    match = _NAKED_DATE_RE.match(raw.strip())
    clock = parse_time_of_day(time_of_day)
    if match is None or clock is None:
        return None
    month, day, year = (int(g) for g in match.groups())
    try:
        day_value = date(year, month, day)
    except ValueError:
        return None
    return _localize(datetime.combine(day_value, clock), zone)


def parse_banner_timestamp(raw: str | None) -> datetime | None:
    """Parse a banner timestamp such as ``"09:59 PM ET, 09/26/2021"``.

    Returns:
        The instant as an aware datetime (in the banner's zone), or
        ``None`` when the text or the zone abbreviation is not recognized.
    """
    if raw is None:
        return None
    match = _BANNER_RE.match(raw.strip())
    if match is None:
        return None
    hour, minute, meridiem, abbreviation, month, day, year = match.groups()
    zone_name = _ZONE_ABBREVIATIONS.get(abbreviation.upper())
    if zone_name is None:
        return None
    hour_value = int(hour) % 12 + (12 if meridiem.upper() == "PM" else 0)
    try:
        return datetime(
            int(year), int(month), int(day), hour_value, int(minute),
            tzinfo=ZoneInfo(zone_name),
        )
    except ValueError:
        return None


def parse_iso_datetime(raw: str | None) -> datetime | None:
    """Parse a canonical ISO-8601 date or datetime.

    A date-only value is midnight UTC; a datetime without an offset is
    taken to be UTC.
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def format_iso_datetime(moment: datetime) -> str:
    """Render an instant as ISO-8601 UTC with a ``Z`` suffix.

    Naive datetimes are assumed to already be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
