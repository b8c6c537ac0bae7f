"""
Test configuration and fixtures
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from coolstream.core.config import settings
from coolstream.services.storage import KeyValueStore


@pytest.fixture(autouse=True)
def no_rate_limiting(monkeypatch):
    """Upstream calls are mocked; never wait on the token bucket"""
    monkeypatch.setattr(settings, "DISABLE_RATE_LIMITING", True)


@pytest.fixture
def fake_server():
    """Fresh in-memory Redis server per test"""
    return fakeredis.FakeServer()


@pytest.fixture
async def fake_redis(fake_server):
    """Provide fake Redis client for testing"""
    redis_client = fakeredis.FakeAsyncRedis(server=fake_server, decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


@pytest.fixture
def kv_store(fake_redis):
    """Key-value store backed by fake Redis"""
    return KeyValueStore(client=fake_redis)


class FakeClock:
    """Deterministic clock advancing one minute per reading"""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc))


@pytest.fixture
def sample_tmdb_movie():
    """Sample TMDB movie data"""
    return {
        "id": 550,
        "title": "Fight Club",
        "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        "backdrop_path": "/fCayJrkfRaCRCTh8GqN30f8oyQF.jpg",
        "overview": "A ticking-time-bomb insomniac...",
        "release_date": "1999-10-15",
        "vote_average": 8.4,
        "vote_count": 26280,
        "genre_ids": [18, 53],
        "popularity": 45.3,
    }


@pytest.fixture
def sample_tmdb_series():
    """Sample TMDB series data"""
    return {
        "id": 1396,
        "name": "Breaking Bad",
        "poster_path": "/ggFHVNu6YYI5L9pCfOacjizRGt.jpg",
        "backdrop_path": "/tsRy63Mu5cu8etL1X7ZLyf7UP1M.jpg",
        "overview": "A high school chemistry teacher...",
        "first_air_date": "2008-01-20",
        "vote_average": 8.9,
        "vote_count": 12000,
        "genre_ids": [18, 80],
        "origin_country": ["US"],
        "popularity": 120.5,
    }


@pytest.fixture
def sample_search_response(sample_tmdb_movie):
    return {
        "page": 1,
        "results": [
            sample_tmdb_movie,
            {"id": 5, "title": "Four Rooms", "poster_path": "/p.jpg", "backdrop_path": None,
             "overview": "", "release_date": "1995-12-09", "vote_average": 5.8, "vote_count": 2500,
             "genre_ids": [35]},
        ],
        "total_pages": 1,
        "total_results": 2,
    }


@pytest.fixture
def sample_movie_detail(sample_tmdb_movie):
    """TMDB movie detail with credits, videos and similar appended"""
    return {
        **sample_tmdb_movie,
        "runtime": 139,
        "genres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
        "production_companies": [{"id": 508, "name": "Regency Enterprises"}],
        "budget": 63000000,
        "revenue": 100853753,
        "tagline": "Mischief. Mayhem. Soap.",
        "status": "Released",
        "credits": {
            "cast": [
                {"id": 1000 + i, "name": f"Actor {i}", "character": f"Role {i}", "profile_path": None}
                for i in range(15)
            ],
            "crew": [
                {"id": 7467, "name": "David Fincher", "job": "Director", "department": "Directing"},
                {"id": 7468, "name": "Art Linson", "job": "Producer", "department": "Production"},
                {"id": 7469, "name": "Jim Uhls", "job": "Writer", "department": "Writing"},
                {"id": 7470, "name": "Jeff Cronenweth", "job": "Director of Photography",
                 "department": "Camera"},
            ],
        },
        "videos": {
            "results": [
                {"id": "v1", "key": "qtRKdVHc-cE", "name": "Trailer", "site": "YouTube", "type": "Trailer"},
                {"id": "v2", "key": "abc", "name": "Featurette", "site": "YouTube", "type": "Featurette"},
                {"id": "v3", "key": "123", "name": "Trailer", "site": "Vimeo", "type": "Trailer"},
            ]
        },
        "similar": {
            "results": [
                {"id": 2000 + i, "title": f"Similar {i}", "poster_path": f"/s{i}.jpg", "vote_average": 7.0}
                for i in range(10)
            ]
        },
    }


@pytest.fixture
def broken_kv():
    """Key-value store whose Redis client fails every command"""
    client = MagicMock()
    error = RedisConnectionError("connection refused")
    client.get = AsyncMock(side_effect=error)
    client.set = AsyncMock(side_effect=error)
    client.delete = AsyncMock(side_effect=error)
    client.ping = AsyncMock(side_effect=error)
    client.pipeline = MagicMock(side_effect=error)
    return KeyValueStore(client=client)
