"""
TV Endpoints
Search, trending, popular and detail lookups for TV shows
"""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from coolstream.api.deps import catalog_response, get_catalog_service
from coolstream.services.catalog import CatalogService

router = APIRouter(prefix="/api/tv", tags=["tv"])


@router.get("/search")
async def search_tv_shows(
    q: Optional[str] = Query(None, description="Search text"),
    page: int = Query(1, description="Result page"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Search TV shows by name"""
    return await catalog_response("TV search", catalog.search("tv", q, page))


@router.get("/trending")
async def trending_tv_shows(
    time_window: str = Query("day", description="day or week"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog_response("trending TV shows", catalog.trending("tv", time_window))


@router.get("/popular")
async def popular_tv_shows(
    page: int = Query(1, description="Result page"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog_response("popular TV shows", catalog.popular("tv", page))


@router.get("/{show_id}")
async def tv_show_details(
    show_id: int = Path(..., description="TMDB TV id"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """TV show with cast, crew, trailers, similar shows and streaming URLs"""
    return await catalog_response("TV show details", catalog.detail("tv", show_id))
