"""Shared fixtures: raw NeoWs-shaped records."""

import pytest


def build_record(
    id="3542519",
    name="(2010 PK9)",
    size=500.0,
    velocity="20.0",
    miss_distance="0.02",
    is_pha=True,
    orbital_data=None,
    date="2026-10-21",
    **extra,
):
    """Build a raw record in the NeoWs feed shape (numeric leaves as strings)."""
    record = {
        "id": id,
        "name": name,
        "estimated_diameter": {
            "meters": {
                "estimated_diameter_min": size * 0.45 if isinstance(size, float) else size,
                "estimated_diameter_max": size,
            },
        },
        "close_approach_data": [{
            "close_approach_date": date,
            "relative_velocity": {"kilometers_per_second": velocity},
            "miss_distance": {"astronomical": miss_distance},
        }],
        "is_potentially_hazardous_asteroid": is_pha,
    }
    if orbital_data is not None:
        record["orbital_data"] = orbital_data
    record.update(extra)
    return record


@pytest.fixture
def make_record():
    return build_record
