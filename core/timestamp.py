import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from numbers import Integral

from .exceptions import InvalidTimestampError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

# Instants outside the datetime range cannot be converted back and are rejected
MIN_MILLIS = (datetime(1, 1, 1, tzinfo=timezone.utc) - EPOCH) // _ONE_MS
MAX_MILLIS = (datetime(9999, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc) - EPOCH) // _ONE_MS

_YEAR_RE = re.compile(r"^(\d{4})$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Time-of-day components present in an extended-format instant
_TIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}(:\d{2})?(:\d{2})?([.,]\d+)?")


class TemporalPrecision(Enum):
    """How precisely a timestamp is known. Ordering ignores it."""
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"


_FORMATS = {
    TemporalPrecision.YEAR: "%Y",
    TemporalPrecision.MONTH: "%Y-%m",
    TemporalPrecision.DAY: "%Y-%m-%d",
    TemporalPrecision.HOUR: "%Y-%m-%dT%H:00Z",
    TemporalPrecision.MINUTE: "%Y-%m-%dT%H:%MZ",
    TemporalPrecision.SECOND: "%Y-%m-%dT%H:%M:%SZ",
}


def _instant_precision(value: str, dt: datetime) -> TemporalPrecision:
    """Finest time component written in ``value``"""
    match = _TIME_RE.match(value)
    if match is None:
        # Basic (compact) formats: fall back to what the parsed value shows
        return TemporalPrecision.MILLISECOND if dt.microsecond else TemporalPrecision.SECOND

    minutes, seconds, fraction = match.groups()
    if fraction:
        return TemporalPrecision.MILLISECOND
    if seconds:
        return TemporalPrecision.SECOND
    if minutes:
        return TemporalPrecision.MINUTE
    return TemporalPrecision.HOUR


@dataclass(frozen=True, order=True)
class Timestamp:
    """An instant stored as signed milliseconds since the Unix epoch (UTC).

    Equality, hashing and ordering use ``millis`` only; ``precision`` is
    carried along for display.

    Examples:
        >>> ts = Timestamp.parse("2024-01-01T10:00:00Z")
        >>> ts.to_unix_millis()
        1704103200000
        >>> Timestamp.parse("2024-03").precision
        <TemporalPrecision.MONTH: 'month'>
    """
    millis: int
    precision: TemporalPrecision = field(default=TemporalPrecision.MILLISECOND, compare=False)

    def __post_init__(self):
        if isinstance(self.millis, bool) or not isinstance(self.millis, Integral):
            raise InvalidTimestampError(repr(self.millis))
        if not MIN_MILLIS <= self.millis <= MAX_MILLIS:
            raise InvalidTimestampError(f"{self.millis} ms is outside the representable range")
        object.__setattr__(self, "millis", int(self.millis))

    @classmethod
    def from_unix_millis(cls, millis: int,
                         precision: TemporalPrecision = TemporalPrecision.MILLISECOND) -> "Timestamp":
        return cls(millis, precision)

    @classmethod
    def from_datetime(cls, dt: datetime,
                      precision: TemporalPrecision = TemporalPrecision.MILLISECOND) -> "Timestamp":
        """Build from a datetime; naive datetimes are taken as UTC"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return cls((dt - EPOCH) // _ONE_MS, precision)

    @classmethod
    def now(cls) -> "Timestamp":
        return cls.from_datetime(datetime.now(timezone.utc))

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """Parse an ISO 8601 instant or a partial date (YYYY, YYYY-MM, YYYY-MM-DD).

        Precision follows the finest component written: hour, minute, second,
        or millisecond when a fractional second is present.
        """
        if not isinstance(text, str):
            raise InvalidTimestampError(repr(text))
        value = text.strip()

        try:
            match = _YEAR_RE.match(value)
            if match:
                return cls.from_datetime(datetime(int(match.group(1)), 1, 1), TemporalPrecision.YEAR)

            match = _MONTH_RE.match(value)
            if match:
                year, month = int(match.group(1)), int(match.group(2))
                return cls.from_datetime(datetime(year, month, 1), TemporalPrecision.MONTH)

            match = _DAY_RE.match(value)
            if match:
                year, month, day = (int(g) for g in match.groups())
                return cls.from_datetime(datetime(year, month, day), TemporalPrecision.DAY)

            # fromisoformat only learned the "Z" suffix in 3.11
            if value.endswith(("Z", "z")):
                value = value[:-1] + "+00:00"
            dt = datetime.fromisoformat(value)
        except ValueError as e:
            raise InvalidTimestampError(f"{text!r} ({e})") from e

        return cls.from_datetime(dt, _instant_precision(value, dt))

    def to_unix_millis(self) -> int:
        return self.millis

    def to_datetime(self) -> datetime:
        return EPOCH + timedelta(milliseconds=self.millis)

    def format(self) -> str:
        """Render according to precision"""
        dt = self.to_datetime()
        if self.precision == TemporalPrecision.MILLISECOND:
            return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
        return dt.strftime(_FORMATS[self.precision])

    def __str__(self) -> str:
        return self.format()
