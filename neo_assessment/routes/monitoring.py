"""Monitoring endpoint: screens the next 7 days of approaches for critical objects."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from neo_assessment.config import Settings, get_settings
from neo_assessment.feed import FeedError, NeoFeedClient, feed_window, get_client, load_records
from neo_assessment.features import ValidationError
from neo_assessment.monitoring import run_monitoring
from neo_assessment.pipeline import assess_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/monitoring")
def monitoring(
    dry_run: bool = Query(False),
    dry_run_camel: bool = Query(False, alias="dryRun"),
    dry: bool = Query(False),
    settings: Settings = Depends(get_settings),
    client: NeoFeedClient = Depends(get_client),
):
    dry_run = dry_run or dry_run_camel or dry
    window = feed_window("week")
    try:
        batch = assess_batch(load_records(client, *window), settings)
    except FeedError as exc:
        logger.error("Monitoring run failed: %s", exc)
        raise HTTPException(status_code=502, detail="Monitoring run failed")
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    report = run_monitoring(batch.asteroids, settings, window, dry_run=dry_run)
    return Response(content=report.model_dump_json(by_alias=True), media_type="application/json")
