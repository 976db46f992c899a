from datetime import date, datetime, tzinfo

from dateutil import parser as dateutil_parser
from dateutil import tz
from dateutil.parser import ParserError

from rollover.core.errors import ConfigError

WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


def resolve_zone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name; empty means the host's local zone."""
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ConfigError(f"unknown time zone '{name}'")
    return zone


def local_now(zone: tzinfo) -> datetime:
    return datetime.now(zone)


def format_list_date(day: date) -> str:
    """`July 9, 2025` style, the date part of a daily list title."""
    return f"{day:%B} {day.day}, {day.year}"


def daily_list_title(prefix: str, day: date) -> str:
    return f"{prefix} {format_list_date(day)}"


def due_date(due: str | None) -> date | None:
    """Calendar date of a task's due value, read from its own encoding.

    Google Tasks stores due dates as midnight UTC timestamps. The time of day
    and offset are ignored, never converted, so `2025-07-10T23:59:00Z` is due
    on 2025-07-10 regardless of the local zone.
    """
    if not due:
        return None
    try:
        return dateutil_parser.isoparse(due).date()
    except (ParserError, ValueError, OverflowError):
        try:
            return date.fromisoformat(due.split("T")[0])
        except ValueError:
            return None


def parse_weekday(value: object) -> int:
    """Parse a digest day into 0 = Sunday .. 6 = Saturday."""
    if isinstance(value, bool):
        raise ConfigError(f"invalid weekday '{value}'")
    if isinstance(value, int):
        day = value
    else:
        raw = str(value).strip().lower()
        if raw.isdigit():
            day = int(raw)
        else:
            matches = [i for i, name in enumerate(WEEKDAYS) if name.startswith(raw[:3])]
            if len(raw) < 3 or len(matches) != 1 or not WEEKDAYS[matches[0]].startswith(raw):
                raise ConfigError(f"invalid weekday '{value}'")
            day = matches[0]
    if not 0 <= day <= 6:
        raise ConfigError(f"invalid weekday '{value}'")
    return day


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7
