"""
Frequency Normalization

Turns a ``{"minutes": ..., "hours": ..., "days": ...}`` mapping into a single
interval in milliseconds plus a human-readable description.

Author: Cronkeeper Project
License: MIT
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from numbers import Real
from typing import Any, List, Optional

from .exceptions import InvalidFrequencyError

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# Rendered largest unit first
UNITS = (
    ("days", "day", MS_PER_DAY),
    ("hours", "hour", MS_PER_HOUR),
    ("minutes", "minute", MS_PER_MINUTE),
)

# Room kept below datetime.max for timezone offsets applied by the timer backend
DATETIME_HEADROOM = timedelta(days=1)


@dataclass(frozen=True)
class Frequency:
    """Normalized recurrence: total interval and its description."""
    interval_ms: float
    description: str

    @property
    def seconds(self) -> float:
        """Interval in seconds."""
        return self.interval_ms / 1000

    @property
    def interval(self) -> timedelta:
        """Interval as a timedelta."""
        return timedelta(milliseconds=self.interval_ms)


def _positive_number(value: Any) -> Optional[Real]:
    """Return value if it is a finite positive real number, else None."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _format_amount(value: Real) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_frequency(frequency: Any) -> Frequency:
    """
    Validate and normalize a frequency specification.

    Each of ``minutes``, ``hours`` and ``days`` contributes when it is a
    positive number; other values are ignored. The description pluralizes a
    unit whenever its amount is not exactly 1.

    Args:
        frequency: Mapping with optional minutes/hours/days keys

    Returns:
        Frequency with interval in milliseconds and description

    Raises:
        InvalidFrequencyError: If frequency is not a mapping, totals zero,
            or is too large to add to the current time
    """
    if not isinstance(frequency, Mapping):
        raise InvalidFrequencyError("Frequency must be a mapping")

    interval_ms = 0
    parts: List[str] = []

    for key, unit, unit_ms in UNITS:
        amount = _positive_number(frequency.get(key))
        if amount is None:
            continue
        interval_ms += amount * unit_ms
        suffix = "" if amount == 1 else "s"
        parts.append(f"{_format_amount(amount)} {unit}{suffix}")

    if interval_ms <= 0:
        raise InvalidFrequencyError(
            "Frequency must specify at least one valid time unit (minutes, hours, or days)"
        )

    try:
        too_large = timedelta(milliseconds=interval_ms) > datetime.max - datetime.now() - DATETIME_HEADROOM
    except (OverflowError, ValueError):
        too_large = True
    if too_large:
        raise InvalidFrequencyError("Frequency interval is too large")

    return Frequency(interval_ms=interval_ms, description=" ".join(parts))
