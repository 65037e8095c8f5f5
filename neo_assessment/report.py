"""
Console and CSV output for an assessed batch.

Produces:
    - Console table: top-N objects by Earth risk
    - CSV file:      one row per object, flattened assessment fields
    - Summary dict:  batch statistics for the closing console block
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import numpy as np

from neo_assessment.models import EnhancedAsteroid

log = logging.getLogger(__name__)

CSV_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "is_pha",
    "close_approach_date",
    "size_m",
    "velocity_km_s",
    "miss_distance_au",
    "impact_energy_j",
    "risk",
    "confidence",
    "torino_scale",
    "hazard_level",
    "moon_probability",
    "moon_confidence",
    "moon_impact_velocity_km_s",
    "moon_impact_energy_j",
    "moon_crater_diameter_m",
    "moon_observable",
    "moon_to_earth_ratio",
    "moon_interpretation",
)

_TABLE_HEADER = (
    f"{'Rank':>4}  {'ID':>10}  {'Name':<28}  {'PHA':>3}  {'Size (m)':>9}  "
    f"{'v (km/s)':>8}  {'Miss (AU)':>9}  {'Risk':>6}  {'Torino':>6}  {'Moon P':>9}"
)
_TABLE_DIVIDER = "-" * len(_TABLE_HEADER)


def rank_by_risk(asteroids: list[EnhancedAsteroid]) -> list[EnhancedAsteroid]:
    """Sort by risk descending; NaN risks go last."""
    return sorted(asteroids, key=lambda a: (np.isnan(a.risk), -np.nan_to_num(a.risk)))


def print_top_hazards(asteroids: list[EnhancedAsteroid], n: int = 20) -> None:
    """Print the top-n objects. Expects the list pre-sorted by ``rank_by_risk``."""
    print()
    print("=== NEO HAZARD ASSESSMENT — TOP {} RESULTS ===".format(min(n, len(asteroids))))
    print(_TABLE_DIVIDER)
    print(_TABLE_HEADER)
    print(_TABLE_DIVIDER)
    for rank, a in enumerate(asteroids[:n], start=1):
        pha = "Y" if a.is_potentially_hazardous_asteroid else ""
        print(
            f"{rank:>4}  {a.id[:10]:>10}  {a.name[:28]:<28}  {pha:>3}  {a.size:>9.1f}  "
            f"{a.velocity:>8.2f}  {a.miss_distance:>9.4f}  {a.risk:>6.3f}  "
            f"{a.torino_scale:>6}  {a.moon_collision_data.probability:>9.2e}"
        )
    print(_TABLE_DIVIDER)
    print()


def to_row(a: EnhancedAsteroid) -> dict:
    moon = a.moon_collision_data
    approach = a.close_approach_data[0] if a.close_approach_data else None
    return {
        "id": a.id,
        "name": a.name,
        "is_pha": a.is_potentially_hazardous_asteroid,
        "close_approach_date": approach.close_approach_date if approach else "",
        "size_m": a.size,
        "velocity_km_s": a.velocity,
        "miss_distance_au": a.miss_distance,
        "impact_energy_j": a.impact_energy,
        "risk": a.risk,
        "confidence": a.confidence,
        "torino_scale": a.torino_scale,
        "hazard_level": a.hazard_level.value,
        "moon_probability": moon.probability,
        "moon_confidence": moon.confidence,
        "moon_impact_velocity_km_s": moon.impact_velocity,
        "moon_impact_energy_j": moon.impact_energy,
        "moon_crater_diameter_m": moon.crater_diameter,
        "moon_observable": moon.observable_from_earth,
        "moon_to_earth_ratio": moon.comparison_to_earth.moon_to_earth_ratio,
        "moon_interpretation": moon.comparison_to_earth.interpretation,
    }


def save_csv(asteroids: list[EnhancedAsteroid], output_path: str = "hazard_assessments.csv") -> None:
    """
    Write one row per object to CSV.

    Scores are rounded to 4 decimals; energies and probabilities keep full
    precision since they span many orders of magnitude.
    """
    if not asteroids:
        log.warning("No assessments to write — skipping CSV output.")
        return

    rounded = {"risk", "confidence", "moon_confidence", "velocity_km_s", "miss_distance_au", "size_m"}
    path = Path(output_path)
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for a in asteroids:
            row = to_row(a)
            for key in rounded:
                row[key] = round(row[key], 4)
            writer.writerow(row)

    log.info("Saved %d assessments to '%s'.", len(asteroids), output_path)


def summarize(asteroids: list[EnhancedAsteroid]) -> dict:
    """Batch statistics. NaN-valued objects are counted but excluded from means."""
    risks = np.array([a.risk for a in asteroids], dtype=np.float64)
    moon = np.array([a.moon_collision_data.probability for a in asteroids], dtype=np.float64)
    finite = np.isfinite(risks)
    torino = np.array([a.torino_scale for a in asteroids], dtype=np.int64)
    return {
        "assessed": len(asteroids),
        "nan_risk": int(np.sum(~finite)),
        "pha": sum(1 for a in asteroids if a.is_potentially_hazardous_asteroid),
        "mean_risk": float(np.mean(risks[finite])) if finite.any() else float("nan"),
        "max_risk": float(np.max(risks[finite])) if finite.any() else float("nan"),
        "max_moon_probability": float(np.nanmax(moon)) if np.isfinite(moon).any() else float("nan"),
        "observable_moon_impacts": sum(1 for a in asteroids if a.moon_collision_data.observable_from_earth),
        "torino_counts": {int(k): int(v) for k, v in zip(*np.unique(torino, return_counts=True))},
    }
