"""Orbit descriptor for the 3D scene.

Not a propagation: the radius is the miss distance on a fixed display scale
and the phase is a random angle.  Orbital elements from the feed are used
when present; otherwise inclination and eccentricity are drawn at random.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from neo_assessment.features import parse_numeric
from neo_assessment.models import NeoRecord

# Display scale: 1 AU = 64 scene units
SCALE_FACTOR_UNITS_PER_AU: float = 64.0

# Objects inside this miss distance are drawn inside Earth's orbit
INNER_ORBIT_LIMIT_AU: float = 1.0

# Fallbacks when the feed has no orbital elements
FALLBACK_INCLINATION_SPAN: float = 0.2   # uniform in [-0.1, 0.1)
FALLBACK_ECCENTRICITY_MAX: float = 0.3   # uniform in [0, 0.3)

# Angular speed: uniform in [0.01, 0.03)
ANGULAR_SPEED_MIN: float = 0.01
ANGULAR_SPEED_SPAN: float = 0.02


@dataclass(frozen=True)
class OrbitDescriptor:
    radius: float
    angular_speed: float
    phase: float
    inclination: float
    eccentricity: float
    semi_major_axis: float
    is_inner_orbit: bool


def _present(value) -> bool:
    return value is not None and value != ""


def parameterize_orbit(
    record: NeoRecord,
    miss_distance: float,
    rng: random.Random,
    scale_factor: float = SCALE_FACTOR_UNITS_PER_AU,
) -> OrbitDescriptor:
    """
    Derive the visualisation orbit for one record.

    Draw order from ``rng`` is fixed (inclination fallback, eccentricity
    fallback, angular speed, phase) so a seeded stream is reproducible.
    Malformed element strings become NaN, like any other numeric leaf.
    """
    elements = record.orbital_data

    if elements is not None and _present(elements.semi_major_axis):
        semi_major_axis = parse_numeric(elements.semi_major_axis, "orbital_data.semi_major_axis").value
    else:
        semi_major_axis = miss_distance

    if elements is not None and _present(elements.inclination):
        inclination = parse_numeric(elements.inclination, "orbital_data.inclination").value
    else:
        inclination = (rng.random() - 0.5) * FALLBACK_INCLINATION_SPAN

    if elements is not None and _present(elements.eccentricity):
        eccentricity = parse_numeric(elements.eccentricity, "orbital_data.eccentricity").value
    else:
        eccentricity = rng.random() * FALLBACK_ECCENTRICITY_MAX

    angular_speed = ANGULAR_SPEED_MIN + rng.random() * ANGULAR_SPEED_SPAN
    phase = rng.random() * 2.0 * math.pi

    return OrbitDescriptor(
        radius=miss_distance * scale_factor,
        angular_speed=angular_speed,
        phase=phase,
        inclination=inclination,
        eccentricity=eccentricity,
        semi_major_axis=semi_major_axis,
        is_inner_orbit=miss_distance < INNER_ORBIT_LIMIT_AU,
    )
