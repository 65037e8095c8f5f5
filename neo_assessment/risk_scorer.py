"""
Heuristic Earth-impact risk score.

Four factors, each in [0, 1]:

    size      = min(1, log10(d + 1) / 3)            d in metres
    distance  = 1 − md / 0.05   if md < 0.05 AU, else 0
    velocity  = min(1, v / 30)                      v in km/s
    pha       = 0.3 if the object is flagged PHA, else 0

    risk = min(1, 0.25·size + 0.4·distance + 0.15·velocity + 0.2·pha)

Confidence is 0.95 for miss distances under 0.1 AU, otherwise
0.75 + 0.2·(1 − md), clamped to [0, 1] and then capped at 0.99.

NaN inputs yield NaN outputs: every ``min``/``max`` below keeps the computed
value as its first argument so Python's comparison rules return the NaN.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration constants
# ---------------------------------------------------------------------------

SIZE_WEIGHT: float = 0.25
DISTANCE_WEIGHT: float = 0.4
VELOCITY_WEIGHT: float = 0.15
PHA_WEIGHT: float = 0.2

# 0.05 AU ≈ 19.5 lunar distances
DISTANCE_THRESHOLD_AU: float = 0.05

# 30 km/s is treated as "very fast"
VELOCITY_SATURATION_KM_S: float = 30.0

PHA_FACTOR: float = 0.3

CLOSE_APPROACH_CONFIDENCE_AU: float = 0.1
CLOSE_APPROACH_CONFIDENCE: float = 0.95
MAX_CONFIDENCE: float = 0.99


@dataclass(frozen=True)
class RiskAssessment:
    risk: float
    confidence: float


def size_factor(size_m: float) -> float:
    if size_m <= -1.0:
        return 0.0
    return min(math.log10(size_m + 1.0) / 3.0, 1.0)


def distance_factor(miss_distance_au: float) -> float:
    if math.isnan(miss_distance_au):
        return math.nan
    if miss_distance_au < DISTANCE_THRESHOLD_AU:
        return 1.0 - miss_distance_au / DISTANCE_THRESHOLD_AU
    return 0.0


def velocity_factor(velocity_km_s: float) -> float:
    return min(velocity_km_s / VELOCITY_SATURATION_KM_S, 1.0)


def risk_confidence(miss_distance_au: float) -> float:
    if miss_distance_au < CLOSE_APPROACH_CONFIDENCE_AU:
        confidence = CLOSE_APPROACH_CONFIDENCE
    else:
        confidence = 0.75 + 0.2 * (1.0 - miss_distance_au)
    # Wide feeds (md > 1 AU) would otherwise go below zero
    confidence = min(max(confidence, 0.0), 1.0)
    return min(confidence, MAX_CONFIDENCE)


def score_risk(size_m: float, velocity_km_s: float, miss_distance_au: float, is_pha: bool) -> RiskAssessment:
    """
    Compute the Earth risk score and its confidence.

    Args:
        size_m:           max estimated diameter in metres
        velocity_km_s:    relative velocity at close approach
        miss_distance_au: close-approach miss distance
        is_pha:           potentially-hazardous flag

    Returns:
        RiskAssessment with risk in [0, 1] and confidence in [0, 0.99].
    """
    pha = PHA_FACTOR if is_pha else 0.0
    weighted = (
        SIZE_WEIGHT * size_factor(size_m)
        + DISTANCE_WEIGHT * distance_factor(miss_distance_au)
        + VELOCITY_WEIGHT * velocity_factor(velocity_km_s)
        + PHA_WEIGHT * pha
    )
    # Negative velocities are the only way below zero
    risk = min(max(weighted, 0.0), 1.0)
    return RiskAssessment(risk=risk, confidence=risk_confidence(miss_distance_au))
