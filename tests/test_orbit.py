"""Tests for the orbit descriptor."""
import math
import random

import pytest

from neo_assessment.models import NeoRecord
from neo_assessment.orbit import parameterize_orbit


def _record(make_record, **kwargs):
    return NeoRecord.model_validate(make_record(**kwargs))


class TestParameterizeOrbit:

    def test_radius_and_inner_flag(self, make_record):
        orbit = parameterize_orbit(_record(make_record), 0.02, random.Random(1))
        assert orbit.radius == pytest.approx(0.02 * 64)
        assert orbit.is_inner_orbit is True

    def test_outer_orbit(self, make_record):
        orbit = parameterize_orbit(_record(make_record, miss_distance="1.2"), 1.2, random.Random(1))
        assert orbit.is_inner_orbit is False

    def test_custom_scale(self, make_record):
        orbit = parameterize_orbit(_record(make_record), 0.5, random.Random(1), scale_factor=10.0)
        assert orbit.radius == pytest.approx(5.0)

    def test_random_fallbacks_in_range(self, make_record):
        rng = random.Random(7)
        for _ in range(200):
            orbit = parameterize_orbit(_record(make_record), 0.02, rng)
            assert -0.1 <= orbit.inclination < 0.1
            assert 0.0 <= orbit.eccentricity < 0.3
            assert 0.01 <= orbit.angular_speed < 0.03
            assert 0.0 <= orbit.phase < 2 * math.pi
            assert orbit.semi_major_axis == 0.02

    def test_feed_elements_used_when_present(self, make_record):
        record = _record(
            make_record,
            orbital_data={"eccentricity": "0.45", "inclination": "12.5", "semi_major_axis": "1.3"},
        )
        orbit = parameterize_orbit(record, 0.02, random.Random(3))
        assert orbit.eccentricity == 0.45
        assert orbit.inclination == 12.5
        assert orbit.semi_major_axis == 1.3

    def test_elements_skip_fallback_draws(self, make_record):
        """With feed elements present only speed and phase consume the RNG."""
        record = _record(
            make_record,
            orbital_data={"eccentricity": "0.1", "inclination": "3.0", "semi_major_axis": "1.1"},
        )
        orbit = parameterize_orbit(record, 0.02, random.Random(11))
        reference = random.Random(11)
        assert orbit.angular_speed == pytest.approx(0.01 + reference.random() * 0.02)
        assert orbit.phase == pytest.approx(reference.random() * 2 * math.pi)

    def test_empty_element_strings_fall_back(self, make_record):
        record = _record(make_record, orbital_data={"eccentricity": "", "inclination": ""})
        orbit = parameterize_orbit(record, 0.3, random.Random(5))
        assert -0.1 <= orbit.inclination < 0.1
        assert 0.0 <= orbit.eccentricity < 0.3
        assert orbit.semi_major_axis == 0.3

    def test_malformed_elements_become_nan(self, make_record):
        record = _record(make_record, orbital_data={"eccentricity": "n/a"})
        orbit = parameterize_orbit(record, 0.02, random.Random(5))
        assert math.isnan(orbit.eccentricity)

    def test_same_seed_same_orbit(self, make_record):
        record = _record(make_record)
        assert parameterize_orbit(record, 0.02, random.Random(42)) == parameterize_orbit(
            record, 0.02, random.Random(42)
        )
