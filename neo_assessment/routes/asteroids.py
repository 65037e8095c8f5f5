"""Asteroid endpoints: /api/asteroids, /api/moon/context."""

from __future__ import annotations

import dataclasses
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from neo_assessment.config import Settings, get_settings
from neo_assessment.feed import FeedError, NeoFeedClient, feed_window, get_client, load_records
from neo_assessment.features import ValidationError
from neo_assessment.models import AsteroidFeedResponse
from neo_assessment.moon_collision import moon_impact_historical_context
from neo_assessment.pipeline import assess_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/asteroids")
def get_asteroids(
    range: str = Query("week", pattern="^(day|week|month)$"),
    seed: int | None = Query(None, description="Run seed mixed into each object's RNG"),
    settings: Settings = Depends(get_settings),
    client: NeoFeedClient = Depends(get_client),
):
    start, end = feed_window(range)
    if seed is not None:
        settings = dataclasses.replace(settings, random_seed=seed)

    try:
        records = load_records(client, start, end)
        batch = assess_batch(records, settings)
    except FeedError as exc:
        logger.error("Failed to fetch asteroids: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to fetch asteroids")
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    body = AsteroidFeedResponse(asteroids=batch.asteroids, skipped=len(batch.skipped))
    # model_dump_json writes NaN as null; the stock JSON encoder would reject it
    return Response(content=body.model_dump_json(by_alias=True), media_type="application/json")


@router.get("/moon/context")
def get_moon_context():
    return moon_impact_historical_context()
