"""
Moon collision risk model.

Estimates the chance that an Earth-approaching object strikes the Moon
during its close-approach window, plus what such an impact would look like.
This is a heuristic built from independent multiplicative factors, not an
impact-probability calculation on an uncertainty ellipse:

    P = P_geometric · F_orbital · F_focusing

1. Geometric probability
    The Moon's effective radius is its physical radius plus 1 % of the miss
    distance (a crude position-uncertainty margin).  The effective cross
    section is compared with the strip the Moon sweeps along its orbit in
    one day, multiplied by a 3-day encounter window, and scaled by the
    approach-geometry factor (4).

2. Orbital factors (product of)
    inclination   exp(−|i − 5.14°| / 10)           Moon's tilt to the ecliptic
    timing        0.5 + 0.5 · min(v, v☾)/max(v, v☾)  range [0.5, 1.0]
    eccentricity  1 − 0.3 · e
    semi-major    exp(−|a − 1 AU|)

3. Gravitational focusing (Öpik)
    Earth term  1 + (v_esc⊕(md) / v)²  with v_esc⊕ evaluated at the miss distance
    Moon term   1 + (2.38 / v)²
    F = min(√(Earth · Moon), 5)

4. Approach geometry (product of)
    |cos(phase)|                       radial vs tangential approach
    1.2 if i < 90° else 0.8            prograde bonus
    1 / (1 + (md / 0.05)²)             distance decay
    1.5 if md inside lunar orbit else 0.5

Small close objects get a probability floor: when md < 0.1 AU and d > 0.1 m,
P ≥ 1e-8 · d / 10.

Impact speed combines the object's speed with the Moon's orbital speed at a
fixed 60° encounter angle (law of cosines) and then adds the lunar escape
speed in quadrature.  Energy and crater size come from ``impact_physics``.

Units are mixed as the inputs arrive: inclination is compared in degrees
when the feed supplies orbital elements, and is a small radian-scale value
when it was filled in at random by ``orbit.parameterize_orbit``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from neo_assessment.impact_physics import MOON_CONTEXT_DENSITY, crater_diameter, impact_energy

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lunar and terrestrial constants
# ---------------------------------------------------------------------------

MOON_ORBITAL_RADIUS_KM: float = 384_400.0
MOON_RADIUS_KM: float = 1_737.0
MOON_ORBITAL_PERIOD_DAYS: float = 27.3
MOON_ORBITAL_VELOCITY_KM_S: float = 1.022
MOON_ORBITAL_INCLINATION_DEG: float = 5.14
MOON_ESCAPE_VELOCITY_KM_S: float = 2.38

EARTH_MASS_KG: float = 5.97e24
GRAVITATIONAL_CONSTANT: float = 6.67e-11  # N·m²/kg²

# Rounded AU conversions used throughout the model
KM_PER_AU: float = 1.496e8
M_PER_AU: float = 1.496e11

MOON_ORBITAL_RADIUS_AU: float = MOON_ORBITAL_RADIUS_KM / KM_PER_AU

# ---------------------------------------------------------------------------
# Model parameters
# ---------------------------------------------------------------------------

ENCOUNTER_WINDOW_DAYS: float = 3.0
POSITION_UNCERTAINTY_FRACTION: float = 0.01

INCLINATION_DECAY_DEG: float = 10.0
ECCENTRICITY_PENALTY: float = 0.3

FOCUSING_CAP: float = 5.0

PROGRADE_BONUS: float = 1.2
RETROGRADE_PENALTY: float = 0.8
DISTANCE_DECAY_SCALE_AU: float = 0.05
ORBIT_CROSSING_BONUS: float = 1.5
ORBIT_OUTSIDE_PENALTY: float = 0.5

ENCOUNTER_ANGLE_RAD: float = math.pi / 3.0

FLOOR_MAX_DISTANCE_AU: float = 0.1
FLOOR_MIN_SIZE_M: float = 0.1
FLOOR_COEFFICIENT: float = 1e-8
FLOOR_REFERENCE_SIZE_M: float = 10.0

# ~2.4 t TNT: faintest flashes picked up by lunar impact monitoring
OBSERVABLE_MIN_ENERGY_J: float = 1e10
OBSERVABLE_MIN_SIZE_M: float = 1.0

CONFIDENCE_BASE: float = 0.6
CONFIDENCE_MIN: float = 0.3
CONFIDENCE_MAX: float = 0.95

EARTH_RISK_FLOOR: float = 1e-10

# Fraction of the Earth miss distance reported as the Moon approach distance
CLOSEST_APPROACH_FRACTION: float = 0.3

INTERPRETATIONS: tuple[tuple[float, str], ...] = (
    (1.0, "More likely to hit Moon than Earth"),
    (0.1, "Significant Moon collision risk"),
    (0.01, "Low but measurable Moon collision risk"),
)
NEGLIGIBLE_INTERPRETATION: str = "Negligible Moon collision risk"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoonCollisionFactors:
    """Intermediate factors, kept for logging and inspection."""

    geometric: float
    orbital: float
    focusing: float
    approach: float


@dataclass(frozen=True)
class EarthComparison:
    earth_probability: float
    ratio: float
    interpretation: str


@dataclass(frozen=True)
class MoonCollisionAssessment:
    """
    Moon collision estimate for one object.

    Fields:
        probability:           heuristic collision probability (≥ 0, not capped at 1)
        confidence:            assessment confidence in [0.3, 0.95]
        impact_velocity:       km/s at the lunar surface
        impact_energy:         J, using the Moon-context density
        crater_diameter:       m, lunar scaling law
        observable_from_earth: flash bright enough to be seen from Earth
        closest_moon_approach: AU
        encounter_date:        first close-approach date from the feed
        comparison:            ratio against the Earth risk score
        factors:               the four multiplicative factors
    """

    probability: float
    confidence: float
    impact_velocity: float
    impact_energy: float
    crater_diameter: float
    observable_from_earth: bool
    closest_moon_approach: float
    encounter_date: str | None
    comparison: EarthComparison
    factors: MoonCollisionFactors = field(repr=False)


# ---------------------------------------------------------------------------
# Factors
# ---------------------------------------------------------------------------


def _square(x: float) -> float:
    # Huge finite inputs go to inf instead of raising OverflowError
    return x * x


def approach_geometry_factor(phase: float, inclination: float, miss_distance_au: float) -> float:
    radial = abs(math.cos(phase))
    prograde = PROGRADE_BONUS if inclination < 90.0 else RETROGRADE_PENALTY
    decay = 1.0 / (1.0 + _square(miss_distance_au / DISTANCE_DECAY_SCALE_AU))
    crossing = ORBIT_CROSSING_BONUS if miss_distance_au < MOON_ORBITAL_RADIUS_AU else ORBIT_OUTSIDE_PENALTY
    return radial * prograde * decay * crossing


def geometric_probability(miss_distance_au: float, approach_factor: float) -> float:
    """Effective lunar cross section over the area swept during the encounter window."""
    uncertainty_km = miss_distance_au * KM_PER_AU * POSITION_UNCERTAINTY_FRACTION
    effective_radius = MOON_RADIUS_KM + uncertainty_km
    daily_arc_km = 2.0 * math.pi * MOON_ORBITAL_RADIUS_KM / MOON_ORBITAL_PERIOD_DAYS

    # π·r² / (arc · 2r) with r cancelled so a huge radius stays finite
    base = math.pi * effective_radius / (2.0 * daily_arc_km) * ENCOUNTER_WINDOW_DAYS
    return base * approach_factor


def timing_factor(velocity_km_s: float) -> float:
    slower = min(velocity_km_s, MOON_ORBITAL_VELOCITY_KM_S)
    faster = max(velocity_km_s, MOON_ORBITAL_VELOCITY_KM_S)
    return 0.5 + 0.5 * (slower / faster)


def orbital_factor(
    inclination: float,
    eccentricity: float,
    semi_major_axis_au: float,
    velocity_km_s: float,
) -> float:
    inclination_term = math.exp(-abs(inclination - MOON_ORBITAL_INCLINATION_DEG) / INCLINATION_DECAY_DEG)
    # Hyperbolic eccentricities would flip the sign
    eccentricity_term = max(1.0 - ECCENTRICITY_PENALTY * eccentricity, 0.0)
    semi_major_term = math.exp(-abs(semi_major_axis_au - 1.0))
    return inclination_term * timing_factor(velocity_km_s) * eccentricity_term * semi_major_term


def gravitational_focusing(velocity_km_s: float, miss_distance_au: float) -> float:
    """Öpik enhancement from Earth's and the Moon's gravity, capped at 5x."""
    if velocity_km_s <= 0 or miss_distance_au <= 0:
        # Zero approach speed or zero distance: focusing diverges
        return FOCUSING_CAP
    earth_escape_m_s = math.sqrt(2.0 * GRAVITATIONAL_CONSTANT * EARTH_MASS_KG / (miss_distance_au * M_PER_AU))
    earth_term = 1.0 + _square(earth_escape_m_s / (velocity_km_s * 1000.0))
    moon_term = 1.0 + _square(MOON_ESCAPE_VELOCITY_KM_S / velocity_km_s)
    return min(math.sqrt(earth_term * moon_term), FOCUSING_CAP)


def probability_floor(size_m: float, miss_distance_au: float) -> float:
    if miss_distance_au < FLOOR_MAX_DISTANCE_AU and size_m > FLOOR_MIN_SIZE_M:
        return FLOOR_COEFFICIENT * (size_m / FLOOR_REFERENCE_SIZE_M)
    return 0.0


# ---------------------------------------------------------------------------
# Derived impact quantities
# ---------------------------------------------------------------------------


def lunar_impact_velocity(velocity_km_s: float) -> float:
    """Impact speed (km/s) at the lunar surface for a 60° encounter."""
    relative_sq = (
        _square(velocity_km_s)
        + _square(MOON_ORBITAL_VELOCITY_KM_S)
        - 2.0 * velocity_km_s * MOON_ORBITAL_VELOCITY_KM_S * math.cos(ENCOUNTER_ANGLE_RAD)
    )
    return math.sqrt(relative_sq + _square(MOON_ESCAPE_VELOCITY_KM_S))


def is_observable_from_earth(energy_joules: float, size_m: float) -> bool:
    return energy_joules >= OBSERVABLE_MIN_ENERGY_J and size_m >= OBSERVABLE_MIN_SIZE_M


def moon_confidence(
    size_m: float,
    miss_distance_au: float,
    is_pha: bool,
    eccentricity: float,
    inclination: float,
) -> float:
    confidence = CONFIDENCE_BASE
    if miss_distance_au < 0.1:
        confidence += 0.2  # close approaches are better measured
    if size_m > 10.0:
        confidence += 0.1
    if is_pha:
        confidence += 0.1
    if eccentricity > 0.5:
        confidence -= 0.1
    if abs(inclination) > 30.0:
        confidence -= 0.1
    return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, confidence))


def interpret_ratio(ratio: float) -> str:
    for threshold, text in INTERPRETATIONS:
        if ratio > threshold:
            return text
    return NEGLIGIBLE_INTERPRETATION


def compare_to_earth(moon_probability: float, earth_risk: float) -> EarthComparison:
    ratio = moon_probability / max(earth_risk, EARTH_RISK_FLOOR)
    return EarthComparison(
        earth_probability=earth_risk,
        ratio=ratio,
        interpretation=interpret_ratio(ratio),
    )


# ---------------------------------------------------------------------------
# Full assessment
# ---------------------------------------------------------------------------


def assess_moon_collision(
    *,
    object_id: str,
    size_m: float,
    velocity_km_s: float,
    miss_distance_au: float,
    is_pha: bool,
    inclination: float,
    eccentricity: float,
    semi_major_axis_au: float,
    phase: float,
    earth_risk: float,
    encounter_date: str | None = None,
    density_kg_m3: float = MOON_CONTEXT_DENSITY,
) -> MoonCollisionAssessment:
    """
    Run the full Moon collision model for one object.

    Args:
        object_id:          feed id, used only for logging
        size_m:             max estimated diameter
        velocity_km_s:      relative velocity at close approach
        miss_distance_au:   Earth miss distance
        is_pha:             potentially-hazardous flag
        inclination:        orbit inclination (see module notes on units)
        eccentricity:       orbit eccentricity
        semi_major_axis_au: orbit semi-major axis
        phase:              orbit phase from the orbit descriptor (radians)
        earth_risk:         Earth risk score the ratio is measured against
        encounter_date:     first close-approach date
        density_kg_m3:      bulk density used for the impact energy

    Returns:
        MoonCollisionAssessment.
    """
    approach = approach_geometry_factor(phase, inclination, miss_distance_au)
    factors = MoonCollisionFactors(
        geometric=geometric_probability(miss_distance_au, approach),
        orbital=orbital_factor(inclination, eccentricity, semi_major_axis_au, velocity_km_s),
        focusing=gravitational_focusing(velocity_km_s, miss_distance_au),
        approach=approach,
    )
    log.debug(
        "Moon collision factors for %s: geometric=%.3e orbital=%.3e focusing=%.3f "
        "approach=%.3f (md=%.4f AU, v=%.2f km/s, d=%.1f m)",
        object_id, factors.geometric, factors.orbital, factors.focusing,
        factors.approach, miss_distance_au, velocity_km_s, size_m,
    )

    probability = factors.geometric * factors.orbital * factors.focusing
    probability = max(probability, probability_floor(size_m, miss_distance_au))
    probability = max(probability, 0.0)

    velocity = lunar_impact_velocity(velocity_km_s)
    energy = impact_energy(size_m, velocity, density_kg_m3)

    return MoonCollisionAssessment(
        probability=probability,
        confidence=moon_confidence(size_m, miss_distance_au, is_pha, eccentricity, inclination),
        impact_velocity=velocity,
        impact_energy=energy,
        crater_diameter=crater_diameter(energy),
        observable_from_earth=is_observable_from_earth(energy, size_m),
        closest_moon_approach=miss_distance_au * CLOSEST_APPROACH_FRACTION,
        encounter_date=encounter_date,
        comparison=compare_to_earth(probability, earth_risk),
        factors=factors,
    )


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HistoricalMoonImpact:
    date: str
    size_m: float
    energy_joules: float
    crater_diameter_m: float
    observed_from_earth: bool
    note: str


HISTORICAL_MOON_IMPACTS: tuple[HistoricalMoonImpact, ...] = (
    HistoricalMoonImpact("1178 AD", 10.0, 1e12, 50.0, True, "Flash reported by Canterbury monks"),
    HistoricalMoonImpact("1866", 5.0, 1e11, 25.0, True, "Multiple observers"),
    HistoricalMoonImpact("2019 (multiple)", 1.0, 1e9, 5.0, True, "Lunar impact monitoring programmes"),
)

OBSERVABLE_IMPACTS_PER_YEAR: int = 1


def moon_impact_historical_context() -> dict:
    """Known observed lunar impacts and the average observable impact rate."""
    return {
        "famousImpacts": [
            {
                "date": impact.date,
                "size": impact.size_m,
                "energy": impact.energy_joules,
                "craterDiameter": impact.crater_diameter_m,
                "observedFromEarth": impact.observed_from_earth,
                "note": impact.note,
            }
            for impact in HISTORICAL_MOON_IMPACTS
        ],
        "averageImpactRate": {
            "perYear": OBSERVABLE_IMPACTS_PER_YEAR,
            "perCentury": OBSERVABLE_IMPACTS_PER_YEAR * 100,
            "perMillennium": OBSERVABLE_IMPACTS_PER_YEAR * 1000,
        },
    }
