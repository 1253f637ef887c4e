"""
Time references for query ranges.

A query side is either absolute (epoch milliseconds, or a datetime converted
to milliseconds) or relative to "now" on the server (value + unit).
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Union


class TimeUnit(str, Enum):
    """Units accepted by relative ranges and aggregator sampling windows."""
    MILLISECONDS = "MILLISECONDS"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    MONTHS = "MONTHS"
    YEARS = "YEARS"


def instant_to_ms(instant: datetime) -> int:
    """Whole unix seconds of ``instant`` times 1000; sub-second part is dropped.

    Naive datetimes are interpreted as local time, as ``datetime.timestamp`` does.
    """
    return math.floor(instant.timestamp()) * 1000


@dataclass(frozen=True)
class Milliseconds:
    """Absolute time as epoch milliseconds."""
    value: int

    def wire_field(self, side: str) -> Dict[str, Any]:
        return {f"{side}_absolute": int(self.value)}


@dataclass(frozen=True)
class UTC:
    """Absolute instant in UTC. Naive datetimes are taken as UTC."""
    instant: datetime

    def wire_field(self, side: str) -> Dict[str, Any]:
        instant = self.instant
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return {f"{side}_absolute": instant_to_ms(instant)}


@dataclass(frozen=True)
class Local:
    """Absolute instant in local time. Naive datetimes are taken as local wall-clock time."""
    instant: datetime

    def wire_field(self, side: str) -> Dict[str, Any]:
        return {f"{side}_absolute": instant_to_ms(self.instant.astimezone())}


@dataclass(frozen=True)
class Relative:
    """Offset back from the server's current time, e.g. ``Relative(1, TimeUnit.WEEKS)``."""
    value: int
    unit: TimeUnit

    def wire_field(self, side: str) -> Dict[str, Any]:
        return {f"{side}_relative": {"value": int(self.value), "unit": TimeUnit(self.unit).value}}


TimeRef = Union[Milliseconds, UTC, Local, Relative]
