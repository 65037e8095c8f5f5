"""
Feature normalisation for raw NEO feed records.

Every numeric leaf in a NeoWs record arrives as a string.  ``parse_numeric``
turns one leaf into a ``ParseResult`` instead of raising, so callers decide
what an unparsable value means:

    permissive → the NaN is carried into every downstream formula
    skip       → the record is dropped from the batch
    reject     → ``ValidationError`` is raised

Only the first close-approach entry is used.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from neo_assessment.models import NeoRecord

log = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when a record has unparsable core numeric fields."""

    def __init__(self, object_id: str, errors: tuple[str, ...] | list[str]):
        self.object_id = object_id
        self.errors = tuple(errors)
        super().__init__(f"NEO {object_id}: " + "; ".join(self.errors))


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one numeric field. ``value`` is NaN on failure."""

    value: float
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_numeric(raw: Any, field: str) -> ParseResult:
    """
    Parse a numeric leaf that may be a string, a number, or absent.

    Args:
        raw:   value from the record (str, int, float or None)
        field: dotted field path, used in the error message

    Returns:
        ParseResult with the float value, or NaN plus an error description.
    """
    if raw is None:
        return ParseResult(math.nan, f"{field}: missing")
    if isinstance(raw, bool):
        return ParseResult(math.nan, f"{field}: expected a number, got {raw!r}")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            return ParseResult(math.nan, f"{field}: cannot parse {raw!r}")
    if not math.isfinite(value):
        return ParseResult(value, f"{field}: non-finite value {raw!r}")
    return ParseResult(value)


@dataclass(frozen=True)
class NormalizedFeatures:
    """Scalar features extracted from one record."""

    size: float           # max estimated diameter, m
    velocity: float       # relative velocity at first close approach, km/s
    miss_distance: float  # miss distance at first close approach, AU
    is_pha: bool
    errors: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors


def normalize(record: NeoRecord) -> NormalizedFeatures:
    """Extract size, velocity, miss distance and the PHA flag from a record."""
    meters = record.estimated_diameter.meters if record.estimated_diameter else None
    size = parse_numeric(
        meters.estimated_diameter_max if meters else None,
        "estimated_diameter.meters.estimated_diameter_max",
    )

    approach = record.close_approach_data[0] if record.close_approach_data else None
    if approach is None:
        velocity = ParseResult(math.nan, "close_approach_data: empty")
        miss = ParseResult(math.nan, "close_approach_data: empty")
    else:
        velocity = parse_numeric(
            approach.relative_velocity.kilometers_per_second if approach.relative_velocity else None,
            "close_approach_data[0].relative_velocity.kilometers_per_second",
        )
        miss = parse_numeric(
            approach.miss_distance.astronomical if approach.miss_distance else None,
            "close_approach_data[0].miss_distance.astronomical",
        )

    errors: list[str] = []
    for result in (size, velocity, miss):
        if not result.ok and result.error not in errors:
            errors.append(result.error)
    if size.ok and size.value < 0:
        errors.append(f"estimated_diameter.meters.estimated_diameter_max: negative size {size.value}")
    if velocity.ok and velocity.value < 0:
        errors.append(f"close_approach_data[0].relative_velocity.kilometers_per_second: negative velocity {velocity.value}")
    if miss.ok and miss.value < 0:
        errors.append(f"close_approach_data[0].miss_distance.astronomical: negative distance {miss.value}")

    if errors:
        log.debug("NEO %s has %d unparsable field(s): %s", record.id, len(errors), errors)

    return NormalizedFeatures(
        size=size.value,
        velocity=velocity.value,
        miss_distance=miss.value,
        is_pha=bool(record.is_potentially_hazardous_asteroid),
        errors=tuple(errors),
    )
