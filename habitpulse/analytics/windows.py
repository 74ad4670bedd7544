"""
Shared time and window utilities.

One timezone policy for every component: timestamps are stored in UTC,
and every calendar-day decision (streak days, adherence date, "today",
hour-of-day, trailing windows) is made in a single engine timezone.

A local calendar day maps to the half-open UTC interval
[local midnight, next local midnight). A "trailing N days" window is the
N local calendar days ending today, inclusive.

Usage:
    from habitpulse.analytics.windows import resolve_timezone, sample_now, trailing_window

    tz = resolve_timezone("Asia/Kolkata")
    now = sample_now(tz)
    week = trailing_window(now, 7)
    week.start_text, week.end_text   # UTC bounds for store queries
"""

import os
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitpulse.store import TIMESTAMP_FORMAT

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

# Where the host zone is configured on Linux and macOS
LOCALTIME_PATH = Path("/etc/localtime")
TIMEZONE_NAME_PATH = Path("/etc/timezone")


@dataclass(frozen=True)
class TimeWindow:
    """A run of whole local calendar days, inclusive on both ends."""

    first_day: date
    last_day: date
    tz: tzinfo

    @property
    def start(self) -> datetime:
        return local_midnight(self.first_day, self.tz)

    @property
    def end(self) -> datetime:
        return local_midnight(self.last_day + timedelta(days=1), self.tz)

    @property
    def start_text(self) -> str:
        return to_db_timestamp(self.start)

    @property
    def end_text(self) -> str:
        return to_db_timestamp(self.end)

    @property
    def days(self) -> list[date]:
        count = (self.last_day - self.first_day).days + 1
        return [self.first_day + timedelta(days=i) for i in range(count)]

    def contains(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day


def resolve_timezone(value: str | tzinfo | None) -> tzinfo:
    """
    Resolve a configured timezone.

    Args:
        value: tzinfo instance, IANA name, "UTC", or "local"/None for the
            host's local zone

    Returns:
        A tzinfo usable for local-day bucketing
    """
    if isinstance(value, tzinfo):
        return value
    if value is None or value == "local":
        return host_timezone()
    if value.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(value)


def _zone_named(name: str) -> ZoneInfo | None:
    if "zoneinfo/" in name:
        name = name.split("zoneinfo/", 1)[1]
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def host_timezone() -> tzinfo:
    """
    The host's zone with its full DST rules.

    Checked in order: $TZ, the /etc/localtime link target, the contents
    of /etc/localtime, then /etc/timezone. Only when none of them yields
    a zone does this fall back to the current UTC offset, which is fixed
    and therefore wrong for dates on the other side of a DST change.
    """
    name = os.environ.get("TZ", "").lstrip(":")
    if name:
        zone = _zone_named(name)
        if zone is not None:
            return zone

    if LOCALTIME_PATH.exists():
        zone = _zone_named(os.path.realpath(LOCALTIME_PATH))
        if zone is not None:
            return zone
        try:
            with open(LOCALTIME_PATH, "rb") as f:
                return ZoneInfo.from_file(f, key="localtime")
        except (OSError, ValueError):
            pass

    if TIMEZONE_NAME_PATH.exists():
        zone = _zone_named(TIMEZONE_NAME_PATH.read_text())
        if zone is not None:
            return zone

    return datetime.now().astimezone().tzinfo


def sample_now(tz: tzinfo) -> datetime:
    """Current instant in the engine timezone. Call once per invocation."""
    return datetime.now(timezone.utc).astimezone(tz)


def ensure_aware(moment: datetime, tz: tzinfo) -> datetime:
    """Interpret a naive datetime in tz; convert an aware one into tz."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min).replace(tzinfo=tz)


def local_date(moment: datetime, tz: tzinfo) -> date:
    return moment.astimezone(tz).date()


def day_window(day: date, tz: tzinfo) -> TimeWindow:
    return TimeWindow(first_day=day, last_day=day, tz=tz)


def trailing_window(now: datetime, days: int, offset: int = 0) -> TimeWindow:
    """
    The `days` local calendar days ending `offset` days before today.

    trailing_window(now, 7) is today and the six days before it;
    trailing_window(now, 7, offset=7) is the week before that.
    """
    if days < 1:
        raise ValueError(f"Window must span at least one day, got {days}")
    last_day = now.date() - timedelta(days=offset)
    return TimeWindow(
        first_day=last_day - timedelta(days=days - 1),
        last_day=last_day,
        tz=now.tzinfo,
    )


def to_db_timestamp(moment: datetime) -> str:
    """Render an instant as stored UTC text. Naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def from_db_timestamp(text: str) -> datetime:
    """Parse stored UTC text (also tolerates ISO 'T' separator and 'Z')."""
    cleaned = text.replace("T", " ").replace("Z", "")
    cleaned = cleaned.split(".")[0]
    return datetime.strptime(cleaned, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def parse_hhmm(value: str) -> int:
    """Parse 'HH:MM' into minutes after midnight."""
    match = HHMM_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """
    Round halves away from zero for positive values (2.5 -> 3).

    Built-in round() uses banker's rounding, which would turn 72.5% into 72.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)


def ratio_component(value: float, reference: float) -> float:
    """min(value / reference, 1) * 100, with a zero reference giving 0."""
    if reference <= 0:
        return 0.0
    return max(0.0, min(value / reference, 1.0)) * 100


def sunday_based_weekday(day: date) -> int:
    """Day of week with 0 = Sunday, as stored on timetable slots."""
    return (day.weekday() + 1) % 7
