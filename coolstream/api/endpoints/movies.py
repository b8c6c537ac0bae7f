"""
Movie Endpoints
Search, trending, popular and detail lookups for movies
"""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from coolstream.api.deps import catalog_response, get_catalog_service
from coolstream.services.catalog import CatalogService

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("/search")
async def search_movies(
    q: Optional[str] = Query(None, description="Search text"),
    page: int = Query(1, description="Result page"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Search movies by title"""
    return await catalog_response("movie search", catalog.search("movie", q, page))


@router.get("/trending")
async def trending_movies(
    time_window: str = Query("day", description="day or week"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Movies trending today or this week"""
    return await catalog_response("trending movies", catalog.trending("movie", time_window))


@router.get("/popular")
async def popular_movies(
    page: int = Query(1, description="Result page"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog_response("popular movies", catalog.popular("movie", page))


@router.get("/{movie_id}")
async def movie_details(
    movie_id: int = Path(..., description="TMDB movie id"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Movie with cast, crew, trailers, similar titles and streaming URLs"""
    return await catalog_response("movie details", catalog.detail("movie", movie_id))
