"""FastAPI application — CORS, route registration, health check."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from neo_assessment.models import HealthResponse
from neo_assessment.routes.asteroids import router as asteroids_router
from neo_assessment.routes.monitoring import router as monitoring_router

# Load .env before anything else
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="NEO Hazard Assessment",
    description="Earth risk, Torino classification and Moon collision estimates for near-Earth objects",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(asteroids_router)
app.include_router(monitoring_router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok")
