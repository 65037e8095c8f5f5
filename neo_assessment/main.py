"""
NEO Hazard Assessment — batch entry point.

Run as:
    python -m neo_assessment.main [--range week] [--input feed.json] [--output hazard_assessments.csv]

Environment variables (or a .env file):
    NASA_API_KEY            NeoWs API key (defaults to DEMO_KEY)
    NEO_VALIDATION_POLICY   permissive | skip | reject
    NEO_RANDOM_SEED         optional run seed
    NEO_USE_MOCK_FALLBACK   use generated records when the feed is unreachable

Outputs:
    Top-N hazard table on stdout
    hazard_assessments.csv
    Summary block
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from neo_assessment.config import Settings
from neo_assessment.feed import FeedError, NeoFeedClient, feed_window, flatten_feed, load_records
from neo_assessment.features import ValidationError
from neo_assessment.pipeline import assess_batch
from neo_assessment.report import print_top_hazards, rank_by_risk, save_csv, summarize

log = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
        stream=sys.stdout,
    )


def read_input(path: Path) -> list[dict]:
    """Read records from a saved NeoWs feed payload or a plain JSON list."""
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if isinstance(payload, list):
        return payload
    return flatten_feed(payload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Assess near-Earth objects from the NASA NeoWs feed.")
    parser.add_argument("--range", default="week", choices=("day", "week", "month"))
    parser.add_argument("--input", type=Path, help="JSON feed payload or record list instead of fetching")
    parser.add_argument("--output", default="hazard_assessments.csv")
    parser.add_argument("--top", type=int, default=20)
    parser.add_argument("--seed", type=int, help="Run seed mixed into each object's RNG")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Orchestrate one assessment run.

    Steps:
        1. Load settings and raw records (file or NeoWs feed)
        2. Assess every record
        3. Print ranked table, save CSV
        4. Print summary
    """
    load_dotenv()
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    log.info("=== NEO Hazard Assessment starting ===")

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        log.error("Configuration error: %s", exc)
        sys.exit(1)
    if args.seed is not None:
        settings = dataclasses.replace(settings, random_seed=args.seed)

    # ------------------------------------------------------------------
    # Step 1: Records
    # ------------------------------------------------------------------
    start, end = feed_window(args.range)
    try:
        if args.input:
            records = read_input(args.input)
            log.info("Loaded %d records from '%s'.", len(records), args.input)
        else:
            with NeoFeedClient(settings) as client:
                records = load_records(client, start, end)
    except FeedError as exc:
        log.error("Feed error: %s", exc)
        sys.exit(1)
    except (OSError, ValueError) as exc:
        log.error("Could not read input: %s", exc)
        sys.exit(1)

    if not records:
        log.error("No NEO records to assess.")
        sys.exit(1)

    # ------------------------------------------------------------------
    # Step 2: Assess
    # ------------------------------------------------------------------
    try:
        batch = assess_batch(records, settings)
    except ValidationError as exc:
        log.error("Invalid record (policy=%s): %s", settings.validation_policy, exc)
        sys.exit(1)

    # ------------------------------------------------------------------
    # Step 3: Output
    # ------------------------------------------------------------------
    ranked = rank_by_risk(batch.asteroids)
    print_top_hazards(ranked, n=args.top)
    save_csv(ranked, args.output)

    # ------------------------------------------------------------------
    # Step 4: Summary
    # ------------------------------------------------------------------
    summary = summarize(ranked)
    print("=" * 60)
    print("ASSESSMENT SUMMARY")
    print("=" * 60)
    print(f"  Window:                     {start} .. {end}")
    print(f"  Objects assessed:           {summary['assessed']}")
    print(f"  Skipped (invalid):          {len(batch.skipped)}")
    print(f"  NaN risk (permissive):      {summary['nan_risk']}")
    print(f"  Potentially hazardous:      {summary['pha']}")
    print(f"  Mean / max Earth risk:      {summary['mean_risk']:.3f} / {summary['max_risk']:.3f}")
    print(f"  Max Moon probability:       {summary['max_moon_probability']:.3e}")
    print(f"  Observable Moon impacts:    {summary['observable_moon_impacts']}")
    print(f"  Torino distribution:        {summary['torino_counts']}")
    print("=" * 60)
    print()
    log.info("=== Assessment complete. Output: %s ===", args.output)


if __name__ == "__main__":
    main()
