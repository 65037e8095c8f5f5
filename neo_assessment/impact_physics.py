"""
Impact physics shared by the Earth and Moon assessments.

Mass of a spherical body of diameter d and bulk density ρ:

    m = (4/3) · π · (d/2)³ · ρ

Kinetic energy at speed v (km/s):

    E = ½ · m · (1000 · v)²

Transient crater diameter on the Moon (simplified π-scaling):

    D = K · (E / (ρ_target · g_target)) ^ (1 / 3.4)

with K = 1.8, ρ_target = 2500 kg/m³ (regolith) and g_target = 1.62 m/s².

Density is always passed in by the caller; the Earth and Moon call sites use
different configured values (see ``config.Settings``).
"""

from __future__ import annotations

import math

# Default bulk densities (kg/m³) at the two call sites
EARTH_CONTEXT_DENSITY: float = 2000.0
MOON_CONTEXT_DENSITY: float = 2500.0

# Lunar crater scaling
CRATER_SCALING_CONSTANT: float = 1.8
CRATER_SCALING_EXPONENT: float = 1.0 / 3.4
LUNAR_REGOLITH_DENSITY: float = 2500.0   # kg/m³
LUNAR_SURFACE_GRAVITY: float = 1.62      # m/s²


def asteroid_mass(size_m: float, density_kg_m3: float) -> float:
    """Mass in kg of a sphere with diameter ``size_m``."""
    radius = size_m / 2.0
    # Multiplication overflows to inf where ** would raise
    return (4.0 / 3.0) * math.pi * radius * radius * radius * density_kg_m3


def impact_energy(size_m: float, velocity_km_s: float, density_kg_m3: float) -> float:
    """Kinetic energy in joules."""
    mass = asteroid_mass(size_m, density_kg_m3)
    velocity_m_s = velocity_km_s * 1000.0
    return 0.5 * mass * velocity_m_s * velocity_m_s


def crater_diameter(
    energy_joules: float,
    target_density_kg_m3: float = LUNAR_REGOLITH_DENSITY,
    surface_gravity_m_s2: float = LUNAR_SURFACE_GRAVITY,
    scaling_constant: float = CRATER_SCALING_CONSTANT,
) -> float:
    """Crater diameter in metres. Non-positive energy gives 0.0."""
    if energy_joules <= 0:
        return 0.0
    return scaling_constant * (energy_joules / (target_density_kg_m3 * surface_gravity_m_s2)) ** CRATER_SCALING_EXPONENT
