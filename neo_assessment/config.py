"""Runtime settings for the NEO hazard assessment pipeline.

Values are read from environment variables.  Entry points call
``load_dotenv()`` before ``Settings.from_env()`` so a local ``.env`` file
works the same way as exported variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

log = logging.getLogger(__name__)

VALIDATION_POLICIES: frozenset[str] = frozenset({"permissive", "skip", "reject"})

_TRUE_STRINGS = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_STRINGS


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        number = float(value)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r, using %s.", name, value, default)
        return default
    # NaN / inf are not usable settings
    if number != number or number in (float("inf"), float("-inf")):
        log.warning("Ignoring non-finite %s=%r, using %s.", name, value, default)
        return default
    return number


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        log.warning("Ignoring non-integer %s=%r, using %d.", name, value, default)
        return default


@dataclass(frozen=True)
class Settings:
    """
    Pipeline configuration.

    The two densities describe the same physical quantity (bulk density of a
    rocky asteroid) but are kept separate: the Earth-context energy has
    always used 2000 kg/m³ and the Moon model 2500 kg/m³.
    """

    earth_density_kg_m3: float = 2000.0
    moon_density_kg_m3: float = 2500.0
    orbit_scale_factor: float = 64.0
    validation_policy: str = "permissive"
    random_seed: int | None = None
    nasa_api_key: str = "DEMO_KEY"
    feed_timeout_s: float = 15.0
    feed_cache_ttl_s: int = 3_600
    use_mock_fallback: bool = False
    max_workers: int = 4
    alert_torino_min: int = 6
    alert_risk_min: float = 0.75
    alert_only_pha: bool = True
    alerts_enabled: bool = True

    def __post_init__(self) -> None:
        if self.validation_policy not in VALIDATION_POLICIES:
            raise ValueError(
                f"Unknown validation policy {self.validation_policy!r}; "
                f"expected one of {sorted(VALIDATION_POLICIES)}."
            )
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1.")

    @property
    def densities_differ(self) -> bool:
        return self.earth_density_kg_m3 != self.moon_density_kg_m3

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        seed_raw = os.environ.get("NEO_RANDOM_SEED")
        random_seed: int | None = None
        if seed_raw:
            try:
                random_seed = int(seed_raw)
            except ValueError:
                log.warning("Ignoring non-integer NEO_RANDOM_SEED=%r.", seed_raw)

        settings = cls(
            earth_density_kg_m3=_env_float("NEO_EARTH_DENSITY", cls.earth_density_kg_m3),
            moon_density_kg_m3=_env_float("NEO_MOON_DENSITY", cls.moon_density_kg_m3),
            orbit_scale_factor=_env_float("NEO_ORBIT_SCALE", cls.orbit_scale_factor),
            validation_policy=os.environ.get("NEO_VALIDATION_POLICY", cls.validation_policy).strip().lower(),
            random_seed=random_seed,
            nasa_api_key=os.environ.get("NASA_API_KEY") or cls.nasa_api_key,
            feed_timeout_s=_env_float("NEO_FEED_TIMEOUT", cls.feed_timeout_s),
            feed_cache_ttl_s=_env_int("NEO_FEED_CACHE_TTL", cls.feed_cache_ttl_s),
            use_mock_fallback=_env_bool("NEO_USE_MOCK_FALLBACK", cls.use_mock_fallback),
            max_workers=_env_int("NEO_MAX_WORKERS", cls.max_workers),
            alert_torino_min=_env_int("ALERT_TORINO_MIN", cls.alert_torino_min),
            alert_risk_min=_env_float("ALERT_RISK_MIN", cls.alert_risk_min),
            alert_only_pha=_env_bool("ALERT_ONLY_PHA", cls.alert_only_pha),
            # Alerts stay on unless explicitly set to "false"
            alerts_enabled=os.environ.get("ALERTS_ENABLED", "true").strip().lower() != "false",
        )
        if settings.densities_differ:
            log.warning(
                "Earth-context density (%.0f kg/m³) differs from Moon-context density "
                "(%.0f kg/m³); impact energies for the two bodies are not directly comparable.",
                settings.earth_density_kg_m3,
                settings.moon_density_kg_m3,
            )
        return settings


# Singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
