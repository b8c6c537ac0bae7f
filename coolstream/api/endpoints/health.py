"""
Health Check Endpoint
"""
from fastapi import APIRouter, Depends, Query
from coolstream.core.config import settings
from coolstream.services.storage import KeyValueStore, get_kv_store

router = APIRouter()


@router.get("/health")
async def health_check(
    include_storage: bool = Query(False, description="Ping the library store"),
    kv: KeyValueStore = Depends(get_kv_store),
):
    """Health check endpoint for monitoring"""
    payload = {
        "status": "healthy",
        "version": "1.0.0",
        "base_url": settings.BASE_URL,
    }

    if include_storage:
        payload["storage"] = "ok" if await kv.ping() else "unavailable"

    return payload
