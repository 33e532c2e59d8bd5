"""RFC 5545 durations and calendar-aware instant arithmetic."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo

_DURATION_RE = re.compile(
    r"""
    ^(?P<sign>[+-])?P
    (?:(?P<weeks>\d+)W)?
    (?:(?P<days>\d+)D)?
    (?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Duration:
    """A parsed duration.

    Week and day parts are nominal (calendar days in the task's zone); the
    time part is exact elapsed time.
    """

    sign: int = 1
    weeks: int = 0
    days: int = 0
    seconds: int = 0

    @property
    def is_negative(self) -> bool:
        return self.sign < 0 and (self.weeks or self.days or self.seconds) > 0

    @property
    def total_days(self) -> int:
        return self.weeks * 7 + self.days

    def add_to(self, millis: int, zone: tzinfo | None = None) -> int:
        """Add this duration to an instant.

        Args:
            millis: Start instant in epoch milliseconds
            zone: Zone whose wall clock the day part follows; UTC when None

        Returns:
            Resulting instant in epoch milliseconds
        """
        shift = 0
        if self.total_days:
            start = datetime.fromtimestamp(millis // 1000, zone or UTC)
            moved = start + timedelta(days=self.sign * self.total_days)
            shift = round((moved.timestamp() - start.timestamp()) * 1000)
        return millis + shift + self.sign * self.seconds * 1000


def parse_duration(text: str) -> Duration:
    """Parse an RFC 5545 duration such as ``P1D``, ``-PT15M`` or ``P1DT2H``.

    Raises:
        ValueError: If *text* is not a valid duration
    """
    normalized = (text or "").strip().upper()
    match = _DURATION_RE.match(normalized)
    if (
        match is None
        or normalized.endswith("T")
        or not any(match.group(g) for g in ("weeks", "days", "hours", "minutes", "seconds"))
    ):
        raise ValueError(f"Invalid duration: {text!r}")

    def part(name: str) -> int:
        return int(match.group(name) or 0)

    return Duration(
        sign=-1 if match.group("sign") == "-" else 1,
        weeks=part("weeks"),
        days=part("days"),
        seconds=part("hours") * 3600 + part("minutes") * 60 + part("seconds"),
    )
