"""Tests for mass, kinetic energy and lunar crater scaling."""
import math

import pytest

from neo_assessment.impact_physics import (
    EARTH_CONTEXT_DENSITY,
    MOON_CONTEXT_DENSITY,
    asteroid_mass,
    crater_diameter,
    impact_energy,
)


def test_mass_of_sphere():
    assert asteroid_mass(10.0, 2000.0) == pytest.approx(4 / 3 * math.pi * 125 * 2000)


def test_energy_uses_metres_per_second():
    mass = asteroid_mass(10.0, 2000.0)
    assert impact_energy(10.0, 20.0, 2000.0) == pytest.approx(0.5 * mass * 20_000.0 ** 2)
    assert impact_energy(10.0, 20.0, 2000.0) == pytest.approx(2.0944e14, rel=1e-4)


def test_energy_scales_with_density():
    earth = impact_energy(50.0, 12.0, EARTH_CONTEXT_DENSITY)
    moon = impact_energy(50.0, 12.0, MOON_CONTEXT_DENSITY)
    assert moon / earth == pytest.approx(1.25)


def test_zero_size_or_speed():
    assert impact_energy(0.0, 20.0, 2000.0) == 0.0
    assert impact_energy(10.0, 0.0, 2000.0) == 0.0


def test_crater_scaling_law():
    energy = 1e12
    expected = 1.8 * (energy / (2500 * 1.62)) ** (1 / 3.4)
    assert crater_diameter(energy) == pytest.approx(expected)
    assert crater_diameter(energy) == pytest.approx(529, rel=0.01)


def test_crater_grows_with_energy():
    sizes = [crater_diameter(10.0 ** k) for k in range(6, 20)]
    assert sizes == sorted(sizes)


def test_crater_non_negative():
    assert crater_diameter(0.0) == 0.0
    assert crater_diameter(-5.0) == 0.0


def test_nan_energy_propagates():
    assert math.isnan(crater_diameter(math.nan))


def test_huge_inputs_overflow_to_inf():
    assert math.isinf(asteroid_mass(1e120, 2000.0))
    assert math.isinf(impact_energy(10.0, 1e160, 2000.0))
    assert math.isinf(crater_diameter(math.inf))
