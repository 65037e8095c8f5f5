"""Tests for ranking, CSV output and batch summary."""
import csv
import math

import pytest

from neo_assessment.pipeline import enhance_asteroid
from neo_assessment.report import CSV_FIELDS, print_top_hazards, rank_by_risk, save_csv, summarize


@pytest.fixture
def batch(make_record):
    return [
        enhance_asteroid(make_record(id="far", size=10.0, velocity="5.0", miss_distance="0.3", is_pha=False)),
        enhance_asteroid(make_record(id="broken", velocity="??", is_pha=False)),
        enhance_asteroid(make_record(id="close")),
    ]


def test_rank_by_risk_puts_nan_last(batch):
    assert [a.id for a in rank_by_risk(batch)] == ["close", "far", "broken"]


def test_save_csv(batch, tmp_path):
    path = tmp_path / "out.csv"
    save_csv(rank_by_risk(batch), str(path))
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        rows = list(reader)
        assert tuple(reader.fieldnames) == CSV_FIELDS
    assert [row["id"] for row in rows] == ["close", "far", "broken"]
    assert float(rows[0]["risk"]) == pytest.approx(0.625, abs=1e-3)
    assert rows[0]["close_approach_date"] == "2026-10-21"
    assert rows[0]["is_pha"] == "True"
    assert rows[2]["risk"] == "nan"


def test_save_csv_empty(tmp_path):
    path = tmp_path / "out.csv"
    save_csv([], str(path))
    assert not path.exists()


def test_summarize(batch):
    summary = summarize(batch)
    assert summary["assessed"] == 3
    assert summary["nan_risk"] == 1
    assert summary["pha"] == 1
    assert summary["max_risk"] == pytest.approx(0.625, abs=1e-3)
    assert summary["mean_risk"] == pytest.approx((batch[0].risk + batch[2].risk) / 2)
    assert sum(summary["torino_counts"].values()) == 3


def test_summarize_empty():
    summary = summarize([])
    assert summary["assessed"] == 0
    assert math.isnan(summary["mean_risk"])
    assert summary["torino_counts"] == {}


def test_print_top_hazards(batch, capsys):
    print_top_hazards(rank_by_risk(batch), n=2)
    out = capsys.readouterr().out
    assert "TOP 2 RESULTS" in out
    assert "close" in out
    assert "broken" not in out
