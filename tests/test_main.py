"""Tests for the batch command-line entry point."""
import csv
import json

import pytest

from neo_assessment.main import main, read_input


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("NEO_VALIDATION_POLICY", "NEO_RANDOM_SEED", "NEO_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_read_input_accepts_list_and_feed(tmp_path, make_record):
    records = [make_record(id="a"), make_record(id="b")]
    as_list = _write(tmp_path / "list.json", records)
    as_feed = _write(tmp_path / "feed.json", {"near_earth_objects": {"2026-10-19": records}})
    assert read_input(as_list) == records
    assert read_input(as_feed) == records


def test_main_writes_csv_and_summary(tmp_path, make_record, capsys):
    source = _write(tmp_path / "feed.json", [
        make_record(id="close"),
        make_record(id="far", size=10.0, velocity="5.0", miss_distance="0.3", is_pha=False),
    ])
    output = tmp_path / "out.csv"
    main(["--input", str(source), "--output", str(output), "--seed", "1"])

    out = capsys.readouterr().out
    assert "ASSESSMENT SUMMARY" in out
    assert any(line.split() == ["Objects", "assessed:", "2"] for line in out.splitlines())
    with output.open(newline="", encoding="utf-8") as fh:
        assert [row["id"] for row in csv.DictReader(fh)] == ["close", "far"]


def test_main_missing_input(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(tmp_path / "missing.json")])
    assert excinfo.value.code == 1


def test_main_reject_policy_exits(tmp_path, make_record, monkeypatch):
    monkeypatch.setenv("NEO_VALIDATION_POLICY", "reject")
    source = _write(tmp_path / "feed.json", [make_record(velocity="??")])
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(source), "--output", str(tmp_path / "out.csv")])
    assert excinfo.value.code == 1


def test_main_bad_policy_exits(tmp_path, make_record, monkeypatch):
    monkeypatch.setenv("NEO_VALIDATION_POLICY", "whatever")
    source = _write(tmp_path / "feed.json", [make_record()])
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(source)])
    assert excinfo.value.code == 1


def test_main_non_object_input_exits(tmp_path):
    source = _write(tmp_path / "feed.json", "not a feed")
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(source)])
    assert excinfo.value.code == 1
