"""Derive a thread's temperature from how recently it was updated.

Temperature is never stored; it is recomputed from ``updated_at`` every time
it is needed.
"""

from datetime import UTC, datetime

from threads_tree.errors import InvalidTimestamp
from threads_tree.models.entity import Temperature

# Ascending upper bounds in days, inclusive. First bound not exceeded wins.
TEMPERATURE_THRESHOLDS: tuple[tuple[float, Temperature], ...] = (
    (1, "hot"),
    (3, "warm"),
    (7, "tepid"),
    (14, "cold"),
    (30, "freezing"),
    (float("inf"), "frozen"),
)

# Hottest to coldest, for sorting.
TEMPERATURE_ORDER: tuple[Temperature, ...] = tuple(t for _, t in TEMPERATURE_THRESHOLDS)

_SECONDS_PER_DAY = 86_400


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO 8601 timestamp into an aware datetime (naive means UTC)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise InvalidTimestamp(value) from None
    else:
        raise InvalidTimestamp(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def derive_temperature(updated_at: str | datetime, now: datetime | None = None) -> Temperature:
    """Map the age of ``updated_at`` to one of six temperature buckets.

    Args:
        updated_at: ISO timestamp (or datetime) of the last update.
        now: Reference time, defaults to the current wall clock.

    Raises:
        InvalidTimestamp: If ``updated_at`` cannot be parsed.
    """
    updated = parse_timestamp(updated_at)
    reference = parse_timestamp(now) if now is not None else datetime.now(UTC)

    age_days = (reference - updated).total_seconds() / _SECONDS_PER_DAY
    for max_days, temperature in TEMPERATURE_THRESHOLDS:
        if age_days <= max_days:
            return temperature
    return "frozen"
