"""Tests for critical-object screening."""
import json

import pytest

from neo_assessment.config import Settings
from neo_assessment.monitoring import SAMPLE_SIZE, is_critical, run_monitoring, to_summary
from neo_assessment.pipeline import enhance_asteroid

WINDOW = ("2026-10-19", "2026-10-26")


@pytest.fixture
def asteroid(make_record):
    base = enhance_asteroid(make_record())

    def _make(id, torino, risk, pha):
        return base.model_copy(update={
            "id": id,
            "name": f"({id})",
            "torino_scale": torino,
            "risk": risk,
            "is_potentially_hazardous_asteroid": pha,
        })
    return _make


class TestIsCritical:

    def test_torino_threshold(self, asteroid):
        check = is_critical(6, 0.75, True)
        assert check(asteroid("a", 6, 0.1, False))
        assert not check(asteroid("b", 5, 0.1, False))

    def test_risk_threshold_requires_pha(self, asteroid):
        check = is_critical(6, 0.75, True)
        assert check(asteroid("a", 2, 0.8, True))
        assert not check(asteroid("b", 2, 0.8, False))

    def test_risk_threshold_any_object(self, asteroid):
        check = is_critical(6, 0.75, False)
        assert check(asteroid("a", 2, 0.75, False))
        assert not check(asteroid("b", 2, 0.74, False))


class TestRunMonitoring:

    def test_report(self, asteroid):
        batch = [
            asteroid("hot", 7, 0.9, True),
            asteroid("risky", 3, 0.8, True),
            asteroid("calm", 1, 0.2, False),
        ]
        report = run_monitoring(batch, Settings(), WINDOW)
        assert report.counts.total == 3
        assert report.counts.critical == 2
        assert [c.id for c in report.critical] == ["hot", "risky"]
        assert report.critical[0].close_approach_date == "2026-10-21"
        assert report.alerts.enabled is True
        assert report.alerts.dry_run is False
        assert report.window.start == "2026-10-19"

    def test_dry_run_disables_alerts(self, asteroid):
        report = run_monitoring([asteroid("hot", 7, 0.9, True)], Settings(), WINDOW, dry_run=True)
        assert report.alerts.enabled is False
        assert report.alerts.dry_run is True

    def test_alerts_disabled_in_settings(self, asteroid):
        report = run_monitoring([asteroid("hot", 7, 0.9, True)], Settings(alerts_enabled=False), WINDOW)
        assert report.alerts.enabled is False

    def test_sample_is_truncated(self, asteroid):
        batch = [asteroid(str(i), 7, 0.9, True) for i in range(SAMPLE_SIZE + 3)]
        report = run_monitoring(batch, Settings(), WINDOW)
        assert report.counts.critical == SAMPLE_SIZE + 3
        assert len(report.sample) == SAMPLE_SIZE

    def test_empty_batch(self):
        report = run_monitoring([], Settings(), WINDOW)
        assert report.counts.total == 0
        assert report.critical == []

    def test_json_uses_aliases(self, asteroid):
        report = run_monitoring([asteroid("hot", 7, 0.9, True)], Settings(), WINDOW)
        payload = json.loads(report.model_dump_json(by_alias=True))
        assert payload["range"] == {"start": "2026-10-19", "end": "2026-10-26"}
        assert payload["thresholds"] == {"torinoMin": 6, "riskMin": 0.75, "onlyPHA": True}
        assert payload["alerts"] == {"enabled": True, "dryRun": False}
        assert payload["critical"][0]["isPHA"] is True
        assert payload["sample"][0] == {"id": "hot", "name": "(hot)", "torinoScale": 7, "risk": 0.9}


def test_summary_fields(asteroid):
    summary = to_summary(asteroid("hot", 7, 0.9, True))
    assert summary.id == "hot"
    assert summary.miss_distance == 0.02
    assert summary.is_pha is True
