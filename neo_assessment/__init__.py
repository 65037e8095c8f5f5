"""
Near-Earth Object Hazard Assessment.

Turns raw NASA NeoWs close-approach records into a heuristic hazard
assessment per object: an Earth risk score, a Torino-scale classification,
and an estimate of the chance of striking the Moon instead, with impact
energy, crater size and observability.

Usage:
    python -m neo_assessment.main
    uvicorn neo_assessment.server:app

Environment variables:
    NASA_API_KEY   NeoWs API key (DEMO_KEY is used when unset)
"""
