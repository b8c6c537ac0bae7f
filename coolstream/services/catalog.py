"""
Catalog Service
Validates catalog requests, calls TMDB and normalizes its responses
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from coolstream.core.exceptions import ValidationError
from coolstream.models.catalog import (
    CastMember,
    CrewMember,
    Genre,
    MOVIE_GENRES,
    Movie,
    MovieDetail,
    PagedResponse,
    SimilarMovie,
    SimilarShow,
    TVShow,
    TVShowDetail,
    TV_GENRES,
    Video,
)
from coolstream.services.tmdb import TMDBClient
from coolstream.utils.helpers import build_image_url, build_streaming_urls

logger = logging.getLogger(__name__)

MEDIA_TYPES = ("movie", "tv")
TIME_WINDOWS = ("day", "week")
MAX_PAGE = 500  # TMDB refuses pages beyond 500

POSTER_SIZE = "w500"
BACKDROP_SIZE = "w1280"
SIMILAR_POSTER_SIZE = "w300"

CAST_LIMIT = 10
SIMILAR_LIMIT = 6
CREW_JOBS = {"Director", "Producer", "Writer"}

GENRE_TABLES = {"movie": MOVIE_GENRES, "tv": TV_GENRES}


def genre_names(genre_ids: Iterable[int], media_type: str) -> List[str]:
    """Display names for TMDB genre ids; ids unknown for the media type are skipped"""
    table = GENRE_TABLES.get(media_type, {})
    return [table[genre_id] for genre_id in genre_ids if genre_id in table]


def normalize_movie(item: Dict[str, Any]) -> Movie:
    """Convert a TMDB movie list entry to a Movie"""
    return Movie(
        id=item["id"],
        title=item.get("title") or "",
        overview=item.get("overview") or "",
        poster_url=build_image_url(item.get("poster_path"), POSTER_SIZE),
        backdrop_url=build_image_url(item.get("backdrop_path"), BACKDROP_SIZE),
        release_date=item.get("release_date") or None,
        vote_average=item.get("vote_average") or 0.0,
        vote_count=item.get("vote_count") or 0,
        genre_ids=item.get("genre_ids") or [],
        genre_names=genre_names(item.get("genre_ids") or [], "movie"),
        streaming_urls=build_streaming_urls(item["id"], "movie"),
    )


def normalize_tv_show(item: Dict[str, Any]) -> TVShow:
    """Convert a TMDB TV list entry to a TVShow"""
    return TVShow(
        id=item["id"],
        name=item.get("name") or "",
        overview=item.get("overview") or "",
        poster_url=build_image_url(item.get("poster_path"), POSTER_SIZE),
        backdrop_url=build_image_url(item.get("backdrop_path"), BACKDROP_SIZE),
        first_air_date=item.get("first_air_date") or None,
        vote_average=item.get("vote_average") or 0.0,
        vote_count=item.get("vote_count") or 0,
        genre_ids=item.get("genre_ids") or [],
        genre_names=genre_names(item.get("genre_ids") or [], "tv"),
        origin_country=item.get("origin_country") or [],
        streaming_urls=build_streaming_urls(item["id"], "tv"),
    )


def _credits(data: Dict[str, Any]) -> Dict[str, List[Any]]:
    """Trimmed cast, crew limited to key jobs and YouTube trailers"""
    credits = data.get("credits") or {}
    cast = [CastMember.model_validate(person) for person in (credits.get("cast") or [])[:CAST_LIMIT]]
    crew = [
        CrewMember.model_validate(person)
        for person in credits.get("crew") or []
        if person.get("job") in CREW_JOBS
    ]
    videos = [
        Video.model_validate(video)
        for video in (data.get("videos") or {}).get("results") or []
        if video.get("site") == "YouTube" and video.get("type") == "Trailer"
    ]
    return {"cast": cast, "crew": crew, "videos": videos}


def _similar_results(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    results = (data.get("similar") or {}).get("results") or []
    return [item for item in results if item.get("id") is not None][:SIMILAR_LIMIT]


def normalize_movie_detail(data: Dict[str, Any]) -> MovieDetail:
    """Convert a TMDB movie detail response (with credits, videos, similar)"""
    base = normalize_movie(data).model_dump(exclude={"genre_ids", "genre_names"})
    similar = [
        SimilarMovie(
            id=item["id"],
            title=item.get("title") or "",
            poster_url=build_image_url(item.get("poster_path"), SIMILAR_POSTER_SIZE),
            vote_average=item.get("vote_average") or 0.0,
        )
        for item in _similar_results(data)
    ]

    return MovieDetail(
        **base,
        genre_ids=[genre["id"] for genre in data.get("genres") or [] if "id" in genre],
        genre_names=[genre["name"] for genre in data.get("genres") or [] if genre.get("name")],
        runtime=data.get("runtime"),
        genres=[Genre.model_validate(genre) for genre in data.get("genres") or []],
        production_companies=data.get("production_companies") or [],
        budget=data.get("budget"),
        revenue=data.get("revenue"),
        tagline=data.get("tagline") or None,
        status=data.get("status"),
        similar=similar,
        **_credits(data),
    )


def normalize_tv_detail(data: Dict[str, Any]) -> TVShowDetail:
    """Convert a TMDB TV detail response (with credits, videos, similar)"""
    base = normalize_tv_show(data).model_dump(exclude={"genre_ids", "genre_names"})
    similar = [
        SimilarShow(
            id=item["id"],
            name=item.get("name") or "",
            poster_url=build_image_url(item.get("poster_path"), SIMILAR_POSTER_SIZE),
            vote_average=item.get("vote_average") or 0.0,
        )
        for item in _similar_results(data)
    ]

    return TVShowDetail(
        **base,
        genre_ids=[genre["id"] for genre in data.get("genres") or [] if "id" in genre],
        genre_names=[genre["name"] for genre in data.get("genres") or [] if genre.get("name")],
        genres=[Genre.model_validate(genre) for genre in data.get("genres") or []],
        number_of_seasons=data.get("number_of_seasons"),
        number_of_episodes=data.get("number_of_episodes"),
        episode_run_time=data.get("episode_run_time") or [],
        created_by=data.get("created_by") or [],
        tagline=data.get("tagline") or None,
        status=data.get("status"),
        similar=similar,
        **_credits(data),
    )


LIST_NORMALIZERS: Dict[str, Tuple[Type[Any], Callable[[Dict[str, Any]], Any]]] = {
    "movie": (Movie, normalize_movie),
    "tv": (TVShow, normalize_tv_show),
}

DETAIL_NORMALIZERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "movie": normalize_movie_detail,
    "tv": normalize_tv_detail,
}


def _check_media_type(media_type: str):
    if media_type not in MEDIA_TYPES:
        raise ValidationError(f"Unsupported media type: {media_type}")


def _check_page(page: int):
    if not 1 <= page <= MAX_PAGE:
        raise ValidationError(f"Page must be between 1 and {MAX_PAGE}")


def to_paged_response(data: Dict[str, Any], media_type: str) -> PagedResponse:
    """Normalize every result of a TMDB list response"""
    item_model, normalize = LIST_NORMALIZERS[media_type]
    results = []
    for item in data.get("results") or []:
        if item.get("id") is None:
            logger.debug("Skipping TMDB result without id: %s", item.get("title") or item.get("name"))
            continue
        results.append(normalize(item))

    return PagedResponse[item_model](
        results=results,
        total_results=data.get("total_results") or 0,
        total_pages=data.get("total_pages") or 0,
        page=data.get("page") or 1,
    )


class CatalogService:
    """Request validation and response shaping for the catalog endpoints"""

    def __init__(self, tmdb: Optional[TMDBClient] = None):
        self.tmdb = tmdb or TMDBClient()

    async def close(self):
        await self.tmdb.close()

    async def search(self, media_type: str, query: Optional[str], page: int = 1) -> PagedResponse:
        """
        Search by free text

        Raises:
            ValidationError: missing query, bad media type or page (no upstream call is made)
            UpstreamError: TMDB failed
        """
        _check_media_type(media_type)
        if not query or not query.strip():
            raise ValidationError("Query parameter is required")
        _check_page(page)

        data = await self.tmdb.search(media_type, query.strip(), page)
        return to_paged_response(data, media_type)

    async def trending(self, media_type: str, time_window: str = "day") -> PagedResponse:
        """Trending titles for a "day" or "week" window"""
        _check_media_type(media_type)
        if time_window not in TIME_WINDOWS:
            raise ValidationError("time_window must be 'day' or 'week'")

        data = await self.tmdb.get_trending(media_type, time_window)
        return to_paged_response(data, media_type)

    async def popular(self, media_type: str, page: int = 1) -> PagedResponse:
        """Popular titles"""
        _check_media_type(media_type)
        _check_page(page)

        data = await self.tmdb.get_popular(media_type, page)
        return to_paged_response(data, media_type)

    async def detail(self, media_type: str, content_id: int):
        """
        Full record for one title, with cast, crew, trailers and similar titles

        Returns:
            MovieDetail or TVShowDetail
        """
        _check_media_type(media_type)
        if content_id < 1:
            raise ValidationError("Content id must be a positive integer")

        data = await self.tmdb.get_details(media_type, content_id)
        if data.get("id") is None:
            data = {**data, "id": content_id}
        return DETAIL_NORMALIZERS[media_type](data)
