"""Critical-object screening over an assessed batch.

An object is critical when its Torino value reaches ``torino_min``, or when
its risk reaches ``risk_min`` (optionally only for PHA-flagged objects).
Alert delivery is left to the caller; this module only builds the report.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from neo_assessment.config import Settings
from neo_assessment.models import (
    AlertStatus,
    CriticalSample,
    CriticalSummary,
    EnhancedAsteroid,
    MonitoringCounts,
    MonitoringReport,
    MonitoringThresholds,
    MonitoringWindow,
)

log = logging.getLogger(__name__)

SAMPLE_SIZE = 5


def is_critical(torino_min: int, risk_min: float, only_pha: bool) -> Callable[[EnhancedAsteroid], bool]:
    def _check(asteroid: EnhancedAsteroid) -> bool:
        torino_match = asteroid.torino_scale >= torino_min
        risk_match = asteroid.risk >= risk_min and (not only_pha or asteroid.is_potentially_hazardous_asteroid)
        return torino_match or risk_match
    return _check


def to_summary(asteroid: EnhancedAsteroid) -> CriticalSummary:
    approach = asteroid.close_approach_data[0] if asteroid.close_approach_data else None
    return CriticalSummary(
        id=asteroid.id,
        name=asteroid.name,
        torino_scale=asteroid.torino_scale,
        risk=asteroid.risk,
        is_pha=asteroid.is_potentially_hazardous_asteroid,
        size=asteroid.size,
        velocity=asteroid.velocity,
        miss_distance=asteroid.miss_distance,
        close_approach_date=approach.close_approach_date if approach else None,
    )


def run_monitoring(
    asteroids: list[EnhancedAsteroid],
    settings: Settings,
    window: tuple[str, str],
    dry_run: bool = False,
) -> MonitoringReport:
    """Screen a batch against the configured alert thresholds."""
    check = is_critical(settings.alert_torino_min, settings.alert_risk_min, settings.alert_only_pha)
    critical = [a for a in asteroids if check(a)]
    if critical:
        log.warning(
            "%d critical NEO(s) in %s..%s: %s",
            len(critical), window[0], window[1],
            ", ".join(a.name or a.id for a in critical[:SAMPLE_SIZE]),
        )
    else:
        log.info("No critical NEOs in %s..%s.", window[0], window[1])

    return MonitoringReport(
        window=MonitoringWindow(start=window[0], end=window[1]),
        counts=MonitoringCounts(total=len(asteroids), critical=len(critical)),
        thresholds=MonitoringThresholds(
            torino_min=settings.alert_torino_min,
            risk_min=settings.alert_risk_min,
            only_pha=settings.alert_only_pha,
        ),
        alerts=AlertStatus(enabled=settings.alerts_enabled and not dry_run, dry_run=dry_run),
        critical=[to_summary(a) for a in critical],
        sample=[
            CriticalSample(id=a.id, name=a.name, torino_scale=a.torino_scale, risk=a.risk)
            for a in critical[:SAMPLE_SIZE]
        ],
    )
