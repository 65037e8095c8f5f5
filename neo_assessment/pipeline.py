"""
Batch assessment: raw feed records → EnhancedAsteroid.

Per object:
    1. normalise the numeric features
    2. derive the orbit descriptor           (draws from the object's RNG)
    3. score Earth risk
    4. classify on the Torino scale          (draws from the object's RNG)
    5. run the Moon collision model
    6. compute the Earth-context impact energy

Objects share no state, so a batch is a plain map over a thread pool.  Each
object gets its own RNG seeded from its id, which makes every output
independent of batch order and worker scheduling.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import pydantic

from neo_assessment.config import Settings
from neo_assessment.features import ValidationError, normalize
from neo_assessment.hazard import classify_hazard
from neo_assessment.impact_physics import impact_energy
from neo_assessment.models import (
    ComparisonToEarth,
    EnhancedAsteroid,
    MoonCollisionData,
    NeoRecord,
    Orbit,
)
from neo_assessment.moon_collision import MoonCollisionAssessment, assess_moon_collision
from neo_assessment.orbit import parameterize_orbit
from neo_assessment.randomness import object_rng
from neo_assessment.risk_scorer import score_risk

log = logging.getLogger(__name__)


def _derived_keys() -> frozenset[str]:
    """Output field names and aliases that a raw record must not pre-populate."""
    keys: set[str] = set()
    for name, info in EnhancedAsteroid.model_fields.items():
        if name in NeoRecord.model_fields:
            continue
        keys.add(name)
        if info.alias:
            keys.add(info.alias)
    return frozenset(keys)


_DERIVED_KEYS = _derived_keys()


@dataclass
class BatchResult:
    """Assessed objects plus the records dropped under the ``skip`` policy."""

    asteroids: list[EnhancedAsteroid] = field(default_factory=list)
    skipped: list[ValidationError] = field(default_factory=list)


def to_record(raw: NeoRecord | Mapping[str, Any]) -> NeoRecord:
    """Validate a raw mapping into a NeoRecord; structural problems raise ValidationError."""
    if isinstance(raw, NeoRecord):
        return raw
    try:
        return NeoRecord.model_validate(raw)
    except pydantic.ValidationError as exc:
        object_id = str(raw.get("id", "<unknown>")) if isinstance(raw, Mapping) else "<unknown>"
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ValidationError(object_id, errors) from exc


def enhance_asteroid(
    raw: NeoRecord | Mapping[str, Any],
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> EnhancedAsteroid:
    """
    Assess one record.

    Args:
        raw:      NeoRecord or the raw feed mapping
        settings: pipeline settings (defaults to ``Settings()``)
        rng:      random source; defaults to one seeded from the object id

    Returns:
        EnhancedAsteroid.

    Raises:
        ValidationError: the record is structurally invalid, or its core
                         numeric fields are unparsable and the policy is not
                         ``permissive``.
    """
    settings = settings or Settings()
    record = to_record(raw)
    if rng is None:
        rng = object_rng(record.id, settings.random_seed)

    features = normalize(record)
    if not features.valid and settings.validation_policy != "permissive":
        raise ValidationError(record.id, features.errors)

    orbit = parameterize_orbit(record, features.miss_distance, rng, settings.orbit_scale_factor)
    earth = score_risk(features.size, features.velocity, features.miss_distance, features.is_pha)
    hazard = classify_hazard(earth.risk, features.is_pha, rng)

    approach = record.close_approach_data[0] if record.close_approach_data else None
    moon = assess_moon_collision(
        object_id=record.id,
        size_m=features.size,
        velocity_km_s=features.velocity,
        miss_distance_au=features.miss_distance,
        is_pha=features.is_pha,
        inclination=orbit.inclination,
        eccentricity=orbit.eccentricity,
        semi_major_axis_au=orbit.semi_major_axis,
        phase=orbit.phase,
        earth_risk=earth.risk,
        encounter_date=approach.close_approach_date if approach else None,
        density_kg_m3=settings.moon_density_kg_m3,
    )

    data = {key: value for key, value in record.model_dump().items() if key not in _DERIVED_KEYS}
    data.update(
        risk=earth.risk,
        confidence=earth.confidence,
        torino_scale=hazard.torino_scale,
        hazard_level=hazard.hazard_level,
        size=features.size,
        velocity=features.velocity,
        miss_distance=features.miss_distance,
        impact_energy=impact_energy(features.size, features.velocity, settings.earth_density_kg_m3),
        orbit=Orbit(
            radius=orbit.radius,
            speed=orbit.angular_speed,
            phase=orbit.phase,
            inclination=orbit.inclination,
            eccentricity=orbit.eccentricity,
            semi_major_axis=orbit.semi_major_axis,
            is_inner_orbit=orbit.is_inner_orbit,
        ),
        moon_collision_data=MoonCollisionData(
            probability=moon.probability,
            confidence=moon.confidence,
            impact_velocity=moon.impact_velocity,
            impact_energy=moon.impact_energy,
            crater_diameter=moon.crater_diameter,
            observable_from_earth=moon.observable_from_earth,
            closest_moon_approach=moon.closest_moon_approach,
            moon_encounter_date=moon.encounter_date,
            comparison_to_earth=ComparisonToEarth(
                earth_probability=moon.comparison.earth_probability,
                moon_to_earth_ratio=moon.comparison.ratio,
                interpretation=moon.comparison.interpretation,
            ),
        ),
    )
    return EnhancedAsteroid.model_validate(data)


@dataclass(frozen=True)
class MoonEarthComparison:
    moon: MoonCollisionAssessment
    earth_risk: float
    ratio: float
    interpretation: str


def compare_moon_earth_risk(asteroid: EnhancedAsteroid, settings: Settings | None = None) -> MoonEarthComparison:
    """Re-run the Moon model on an assessed object and set it against its Earth risk."""
    settings = settings or Settings()
    approach = asteroid.close_approach_data[0] if asteroid.close_approach_data else None
    moon = assess_moon_collision(
        object_id=asteroid.id,
        size_m=asteroid.size,
        velocity_km_s=asteroid.velocity,
        miss_distance_au=asteroid.miss_distance,
        is_pha=asteroid.is_potentially_hazardous_asteroid,
        inclination=asteroid.orbit.inclination,
        eccentricity=asteroid.orbit.eccentricity,
        semi_major_axis_au=asteroid.orbit.semi_major_axis,
        phase=asteroid.orbit.phase,
        earth_risk=asteroid.risk,
        encounter_date=approach.close_approach_date if approach else None,
        density_kg_m3=settings.moon_density_kg_m3,
    )
    return MoonEarthComparison(
        moon=moon,
        earth_risk=asteroid.risk,
        ratio=moon.comparison.ratio,
        interpretation=moon.comparison.interpretation,
    )


def _assess_one(
    raw: NeoRecord | Mapping[str, Any],
    settings: Settings,
) -> tuple[EnhancedAsteroid | None, ValidationError | None]:
    try:
        return enhance_asteroid(raw, settings), None
    except ValidationError as exc:
        if settings.validation_policy == "skip":
            return None, exc
        raise


def assess_batch(
    records: Iterable[NeoRecord | Mapping[str, Any]],
    settings: Settings | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """
    Assess every record in a batch.

    Output order follows input order.  Under the ``skip`` policy invalid
    records are logged and collected in ``BatchResult.skipped``; under any
    other policy the first ValidationError (in input order) is raised.
    """
    settings = settings or Settings()
    workers = max_workers or settings.max_workers
    items = list(records)
    result = BatchResult()
    if not items:
        log.info("Empty batch, nothing to assess.")
        return result

    with ThreadPoolExecutor(max_workers=workers) as executor:
        for asteroid, error in executor.map(lambda raw: _assess_one(raw, settings), items):
            if error is not None:
                log.warning("Skipping %s", error)
                result.skipped.append(error)
            else:
                result.asteroids.append(asteroid)

    top = max(result.asteroids, key=lambda a: -1.0 if math.isnan(a.risk) else a.risk, default=None)
    log.info(
        "Assessed %d NEOs (%d skipped). Top risk: %.3f (%s).",
        len(result.asteroids),
        len(result.skipped),
        top.risk if top else 0.0,
        top.name if top else "-",
    )
    return result
