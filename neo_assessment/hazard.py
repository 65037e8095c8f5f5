"""Torino-scale classification of an Earth risk score.

The risk is first jittered upward by up to 0.3 with a draw from the
caller's RNG, then bucketed:

    jittered < 0.15 → 0           none
             < 0.35 → 1           normal
             < 0.55 → 2 (PHA 3)   attention
             < 0.75 → 4 (PHA 5)   threatening
             < 0.90 → 5 (PHA 6)   threatening
             else   → 6 (PHA 7)   threatening

Torino values 8–10 and the ``certain`` level exist on the public scale but no
bucket maps to them.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from neo_assessment.models import HazardLevel

JITTER_AMPLITUDE: float = 0.3

# (upper bound, torino if not PHA, torino if PHA, level)
TORINO_BUCKETS: tuple[tuple[float, int, int, HazardLevel], ...] = (
    (0.15, 0, 0, HazardLevel.NONE),
    (0.35, 1, 1, HazardLevel.NORMAL),
    (0.55, 2, 3, HazardLevel.ATTENTION),
    (0.75, 4, 5, HazardLevel.THREATENING),
    (0.90, 5, 6, HazardLevel.THREATENING),
)
TOP_BUCKET: tuple[int, int, HazardLevel] = (6, 7, HazardLevel.THREATENING)

# Highest Torino value the buckets can produce
MAX_REACHABLE_TORINO: int = 7


@dataclass(frozen=True)
class HazardClassification:
    torino_scale: int
    hazard_level: HazardLevel
    jittered_risk: float


def bucket_risk(jittered_risk: float, is_pha: bool) -> tuple[int, HazardLevel]:
    """Map an already-jittered risk to (torino, level). NaN lands in the top bucket."""
    for upper, torino, torino_pha, level in TORINO_BUCKETS:
        if jittered_risk < upper:
            return (torino_pha if is_pha else torino), level
    torino, torino_pha, level = TOP_BUCKET
    return (torino_pha if is_pha else torino), level


def classify_hazard(risk: float, is_pha: bool, rng: random.Random) -> HazardClassification:
    """Jitter ``risk`` with one draw from ``rng`` and classify it."""
    jittered = min(risk + rng.random() * JITTER_AMPLITUDE, 1.0)
    torino, level = bucket_risk(jittered, is_pha)
    return HazardClassification(torino_scale=torino, hazard_level=level, jittered_risk=jittered)
