"""
Shared Endpoint Dependencies
Per-request services and error translation for the API routers
"""
import logging
from typing import AsyncIterator, Awaitable, Optional

from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel

from coolstream.core.exceptions import UpstreamError, ValidationError
from coolstream.services.catalog import CatalogService
from coolstream.services.library import UserLibrary
from coolstream.services.storage import KeyValueStore, get_kv_store

logger = logging.getLogger(__name__)


async def get_catalog_service() -> AsyncIterator[CatalogService]:
    """Catalog service with its own TMDB session, closed after the request"""
    service = CatalogService()
    try:
        yield service
    finally:
        await service.close()


def get_library(
    access_key: Optional[str] = Header(None, alias="X-Access-Key", description="Active access key"),
    kv: KeyValueStore = Depends(get_kv_store),
) -> UserLibrary:
    """Library of the namespace selected by the access key"""
    return UserLibrary(kv, access_key)


async def catalog_response(operation: str, call: Awaitable[BaseModel]) -> dict:
    """
    Await a catalog operation and serialize it

    Validation problems become 400s; anything else becomes a generic 500
    so upstream details never reach the caller.
    """
    try:
        result = await call
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UpstreamError as e:
        logger.error(f"Upstream failure during {operation}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    except Exception as e:
        logger.error(f"Error during {operation}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return result.model_dump(mode="json", by_alias=True)
