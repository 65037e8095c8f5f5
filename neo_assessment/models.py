"""Input and output contracts for the NEO hazard assessment pipeline.

Input models mirror the NASA NeoWs feed record.  Numeric leaves are kept as
they arrive (usually strings) and are parsed by ``features.normalize``.
Output field names follow the camelCase contract consumed by the dashboard.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Raw numeric leaf: NeoWs sends strings for most values, floats for diameters
RawNumber = float | str | None


# --- Raw feed record ---

class _RawModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")


class DiameterRange(_RawModel):
    estimated_diameter_min: RawNumber = None
    estimated_diameter_max: RawNumber = None


class EstimatedDiameter(_RawModel):
    meters: DiameterRange | None = None


class RelativeVelocity(_RawModel):
    kilometers_per_second: RawNumber = None


class MissDistance(_RawModel):
    astronomical: RawNumber = None


class CloseApproach(_RawModel):
    close_approach_date: str | None = None
    relative_velocity: RelativeVelocity | None = None
    miss_distance: MissDistance | None = None


class OrbitalData(_RawModel):
    eccentricity: RawNumber = None
    inclination: RawNumber = None
    semi_major_axis: RawNumber = None


class NeoRecord(_RawModel):
    """One near-Earth object as delivered by the feed."""

    id: str
    name: str = ""
    estimated_diameter: EstimatedDiameter | None = None
    close_approach_data: list[CloseApproach] = []
    is_potentially_hazardous_asteroid: bool = False
    orbital_data: OrbitalData | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


# --- Assessment output ---

class HazardLevel(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    ATTENTION = "attention"
    THREATENING = "threatening"
    CERTAIN = "certain"  # representable, never produced by the classifier


class _OutputModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Orbit(_OutputModel):
    radius: float = Field(description="Scaled distance (visualisation units)")
    speed: float = Field(description="Angular speed")
    phase: float = Field(description="Orbital position angle (radians)")
    inclination: float
    eccentricity: float
    semi_major_axis: float
    is_inner_orbit: bool = Field(alias="isInnerOrbit")


class ComparisonToEarth(_OutputModel):
    earth_probability: float = Field(alias="earthProbability")
    moon_to_earth_ratio: float = Field(alias="moonToEarthRatio")
    interpretation: str


class MoonCollisionData(_OutputModel):
    probability: float
    confidence: float
    impact_velocity: float = Field(alias="impactVelocity", description="km/s")
    impact_energy: float = Field(alias="impactEnergy", description="Joules")
    crater_diameter: float = Field(alias="craterDiameter", description="metres")
    observable_from_earth: bool = Field(alias="observableFromEarth")
    closest_moon_approach: float = Field(alias="closestMoonApproach", description="AU")
    moon_encounter_date: str | None = Field(default=None, alias="moonEncounterDate")
    comparison_to_earth: ComparisonToEarth = Field(alias="comparisonToEarth")


class EnhancedAsteroid(NeoRecord):
    """Raw record plus every derived assessment field."""

    model_config = ConfigDict(populate_by_name=True)

    risk: float
    confidence: float
    torino_scale: int = Field(alias="torinoScale")
    hazard_level: HazardLevel = Field(alias="hazardLevel")
    size: float
    velocity: float
    miss_distance: float = Field(alias="missDistance")
    impact_energy: float = Field(alias="impactEnergy")
    orbit: Orbit
    moon_collision_data: MoonCollisionData = Field(alias="moonCollisionData")


# --- API responses ---

class AsteroidFeedResponse(_OutputModel):
    asteroids: list[EnhancedAsteroid]
    skipped: int = 0


class CriticalSummary(_OutputModel):
    id: str
    name: str
    torino_scale: int = Field(alias="torinoScale")
    risk: float
    is_pha: bool = Field(alias="isPHA")
    size: float
    velocity: float
    miss_distance: float = Field(alias="missDistance")
    close_approach_date: str | None = Field(default=None, alias="closeApproachDate")


class HealthResponse(BaseModel):
    status: str = "ok"


class MonitoringWindow(_OutputModel):
    start: str
    end: str


class MonitoringCounts(_OutputModel):
    total: int
    critical: int


class MonitoringThresholds(_OutputModel):
    torino_min: int = Field(alias="torinoMin")
    risk_min: float = Field(alias="riskMin")
    only_pha: bool = Field(alias="onlyPHA")


class AlertStatus(_OutputModel):
    enabled: bool
    dry_run: bool = Field(alias="dryRun")


class CriticalSample(_OutputModel):
    id: str
    name: str
    torino_scale: int = Field(alias="torinoScale")
    risk: float


class MonitoringReport(_OutputModel):
    window: MonitoringWindow = Field(alias="range")
    counts: MonitoringCounts
    thresholds: MonitoringThresholds
    alerts: AlertStatus
    critical: list[CriticalSummary] = []
    sample: list[CriticalSample] = []
