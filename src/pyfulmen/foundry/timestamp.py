"""RFC 3339 timestamps with nanosecond precision.

``datetime`` stops at microseconds, so the timestamp keeps integer nanoseconds since
the Unix epoch and formats them itself:

    >>> ts = TimestampRFC3339Nano.parse("2025-10-14T14:32:15.123456789Z")
    >>> str(ts)
    '2025-10-14T14:32:15.123456789Z'
"""

import re
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Union

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

NANOS_PER_SECOND = 1_000_000_000

_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


@dataclass(frozen=True, order=True)
class TimestampRFC3339Nano:
    """A UTC instant with nanosecond resolution."""

    nanos: int = 0

    # --- Constructors ---

    @classmethod
    def now(cls) -> "TimestampRFC3339Nano":
        return cls(time.time_ns())

    @classmethod
    def from_unix_nano(cls, nanos: int) -> "TimestampRFC3339Nano":
        return cls(int(nanos))

    @classmethod
    def from_datetime(cls, value: datetime) -> "TimestampRFC3339Nano":
        """Convert a datetime; naive values are taken to be UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        micros = (value - EPOCH) // timedelta(microseconds=1)
        return cls(micros * 1000)

    @classmethod
    def parse(cls, text: str) -> "TimestampRFC3339Nano":
        """Parse an RFC 3339 timestamp with any fractional width from 0 to 9 digits.

        Raises:
            ValueError: If ``text`` is not a valid RFC 3339 timestamp
        """
        match = _RFC3339.match(text.strip())
        if match is None:
            raise ValueError(f"invalid RFC3339 timestamp: {text!r}")

        offset = match.group("offset")
        tz = timezone.utc
        if offset not in ("Z", "z"):
            sign = -1 if offset[0] == "-" else 1
            hours, minutes = int(offset[1:3]), int(offset[4:6])
            tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

        try:
            moment = datetime.fromisoformat(f"{match.group('date')}T{match.group('time')}").replace(
                tzinfo=tz
            )
        except ValueError as e:
            raise ValueError(f"invalid RFC3339 timestamp: {text!r}: {e}") from e

        seconds = (moment - EPOCH) // timedelta(seconds=1)
        fraction = int((match.group("fraction") or "").ljust(9, "0"))
        return cls(seconds * NANOS_PER_SECOND + fraction)

    # --- Conversions ---

    def __str__(self) -> str:
        seconds, fraction = divmod(self.nanos, NANOS_PER_SECOND)
        moment = EPOCH + timedelta(seconds=seconds)
        return f"{moment:%Y-%m-%dT%H:%M:%S}.{fraction:09d}Z"

    def isoformat(self) -> str:
        return str(self)

    def to_datetime(self) -> datetime:
        """The timestamp as an aware UTC datetime, truncated to microseconds."""
        return EPOCH + timedelta(microseconds=self.nanos // 1000)

    def unix(self) -> int:
        return self.nanos // NANOS_PER_SECOND

    def unix_nano(self) -> int:
        return self.nanos

    # --- Arithmetic ---

    def add(self, nanos: Union[int, timedelta]) -> "TimestampRFC3339Nano":
        if isinstance(nanos, timedelta):
            nanos = (nanos // timedelta(microseconds=1)) * 1000
        return TimestampRFC3339Nano(self.nanos + nanos)

    def sub(self, other: "TimestampRFC3339Nano") -> int:
        """Nanoseconds from ``other`` to this timestamp."""
        return self.nanos - other.nanos

    def before(self, other: "TimestampRFC3339Nano") -> bool:
        return self.nanos < other.nanos

    def after(self, other: "TimestampRFC3339Nano") -> bool:
        return self.nanos > other.nanos

    def is_zero(self) -> bool:
        """True for the Unix epoch, the default value."""
        return self.nanos == 0


def now() -> TimestampRFC3339Nano:
    return TimestampRFC3339Nano.now()
