"""Health check endpoint.

Reports configuration only. It never calls the catalog or the model, so it
always returns 200 and load balancers keep routing.
"""

from __future__ import annotations

from fastapi import APIRouter

from advisor.config import settings

router = APIRouter(tags=["health"])

VERSION = "0.1.0"


@router.get("/health")
async def health_check() -> dict:
    """Confirms the API process is alive and shows which backends it will use."""
    return {
        "status": "ok",
        "version": VERSION,
        "environment": settings.environment,
        "catalog_mode": settings.catalog_mode,
        "llm_provider": settings.llm_provider,
        "llm_configured": settings.llm_configured,
    }
