"""
TMDB API Client
Async client for The Movie Database API
"""
import aiohttp
import asyncio
import logging
from typing import Dict, Optional, Any
from coolstream.core.config import settings
from coolstream.core.exceptions import UpstreamError
from coolstream.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DETAIL_APPENDS = "credits,videos,similar"


class TMDBClient:
    """Async client for TMDB API"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key or settings.TMDB_API_KEY
        self.base_url = (base_url or settings.TMDB_BASE_URL).rstrip("/")
        self.session: Optional[aiohttp.ClientSession] = None

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.TMDB_TIMEOUT_SECONDS)
            )
        return self.session

    async def close(self):
        """Close aiohttp session"""
        if self.session and not self.session.closed:
            await self.session.close()

    async def _request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Make API request to TMDB

        Raises:
            UpstreamError: non-200 status, timeout, connection failure or bad JSON.
                Upstream error bodies are only logged at debug level.
        """
        if not settings.DISABLE_RATE_LIMITING:
            limiter = RateLimiter.get_limiter("tmdb", settings.TMDB_RATE_LIMIT)
            await limiter.acquire()

        url = f"{self.base_url}{endpoint}"
        request_params: Dict[str, Any] = {"api_key": self.api_key}
        if params:
            request_params.update(params)

        try:
            session = await self.get_session()
            async with session.get(url, params=request_params) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.error("TMDB API error: %s for %s", response.status, endpoint)
                    logger.debug("TMDB error body for %s: %s", endpoint, body[:500])
                    raise UpstreamError(
                        f"TMDB returned {response.status} for {endpoint}",
                        status=response.status,
                    )

                data = await response.json()

        except UpstreamError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"TMDB request timeout: {endpoint}")
            raise UpstreamError(f"TMDB request timeout: {endpoint}") from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"TMDB request error for {endpoint}: {e}")
            raise UpstreamError(f"TMDB request failed: {endpoint}") from e

        if not isinstance(data, dict):
            logger.error("TMDB returned unexpected payload for %s", endpoint)
            raise UpstreamError(f"TMDB returned unexpected payload for {endpoint}")
        return data

    async def search(self, media_type: str, query: str, page: int = 1) -> Dict[str, Any]:
        """
        Search movies or TV shows by free text

        Args:
            media_type: "movie" or "tv"
            query: Search text
            page: Page number
        """
        return await self._request(
            f"/search/{media_type}",
            {"query": query, "page": page, "include_adult": "false"},
        )

    async def get_trending(self, media_type: str, time_window: str = "day") -> Dict[str, Any]:
        """Trending titles for "day" or "week" """
        return await self._request(f"/trending/{media_type}/{time_window}")

    async def get_popular(self, media_type: str, page: int = 1) -> Dict[str, Any]:
        """Popular titles, one page at a time"""
        return await self._request(f"/{media_type}/popular", {"page": page})

    async def get_details(self, media_type: str, tmdb_id: int) -> Dict[str, Any]:
        """
        Get detailed information about a movie or series

        Credits, videos and similar titles are embedded in the same response.

        Args:
            media_type: "movie" or "tv"
            tmdb_id: TMDB ID
        """
        return await self._request(
            f"/{media_type}/{tmdb_id}",
            {"append_to_response": DETAIL_APPENDS},
        )
