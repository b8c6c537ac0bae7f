"""
Catalog API Client
Typed wrapper used by front-ends to call the catalog endpoints
"""
import logging
from typing import Any, Dict, Optional

import httpx

from coolstream.core.config import settings
from coolstream.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Async client for the /api/movies and /api/tv endpoints.

    Every call goes to the server: no retries, no caching. Failures raise
    FetchError naming the operation so the caller can offer a retry.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0,
    ):
        self.base_url = (base_url or settings.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close the HTTP client if this instance created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _get(self, path: str, operation: str, params: Optional[Dict[str, Any]] = None) -> Any:
        client = await self.get_client()
        try:
            response = await client.get(f"{self.base_url}{path}", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Catalog request failed ({operation}): {e}")
            raise FetchError(operation) from e

        if not response.is_success:
            logger.warning("Catalog request %s returned %s", operation, response.status_code)
            raise FetchError(operation, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(operation, response.status_code) from e

    async def search_movies(self, query: str, page: int = 1) -> Dict[str, Any]:
        return await self._get("/api/movies/search", "search movies", {"q": query, "page": page})

    async def get_trending_movies(self, time_window: str = "day") -> Dict[str, Any]:
        return await self._get("/api/movies/trending", "get trending movies", {"time_window": time_window})

    async def get_popular_movies(self, page: int = 1) -> Dict[str, Any]:
        return await self._get("/api/movies/popular", "get popular movies", {"page": page})

    async def get_movie_details(self, movie_id: int) -> Dict[str, Any]:
        return await self._get(f"/api/movies/{movie_id}", "get movie details")

    async def search_tv_shows(self, query: str, page: int = 1) -> Dict[str, Any]:
        return await self._get("/api/tv/search", "search TV shows", {"q": query, "page": page})

    async def get_trending_tv_shows(self, time_window: str = "day") -> Dict[str, Any]:
        return await self._get("/api/tv/trending", "get trending TV shows", {"time_window": time_window})

    async def get_popular_tv_shows(self, page: int = 1) -> Dict[str, Any]:
        return await self._get("/api/tv/popular", "get popular TV shows", {"page": page})

    async def get_tv_details(self, show_id: int) -> Dict[str, Any]:
        return await self._get(f"/api/tv/{show_id}", "get TV show details")
