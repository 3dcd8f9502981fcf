"""
Health check endpoint
"""
from fastapi import APIRouter

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", summary="Liveness check")
async def health_check():
    """Always returns ok; external services are not contacted"""
    return {"ok": True}
