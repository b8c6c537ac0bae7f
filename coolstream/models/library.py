"""
Library Models
Pydantic models for the per-user records kept in the key-value store
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Literal, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ContentType = Literal["movie", "tv"]
Provider = Literal["vidsrc", "vikingEmbed", "filmku"]


class LibraryModel(BaseModel):
    """Stored and wire form is camelCase; either form is accepted on input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserPreferences(LibraryModel):
    """Player and display preferences, one record per user"""
    preferred_provider: Provider = "vidsrc"
    autoplay: bool = Field(True, strict=True)
    volume: float = Field(0.8, ge=0.0, le=1.0, strict=True)
    quality: Literal["auto", "720p", "1080p"] = "auto"
    subtitles: bool = Field(False, strict=True)
    theme: Literal["dark", "light"] = "dark"


class WatchlistEntry(LibraryModel):
    """Watchlist item as submitted by a caller (no timestamp yet)"""
    id: int
    type: ContentType
    title: str
    poster_path: Optional[str] = None
    vote_average: float = 0.0

    @property
    def identity(self) -> Tuple[int, str]:
        return self.id, self.type


class WatchlistItem(WatchlistEntry):
    """Saved watchlist item; added_at is set once on insertion"""
    added_at: datetime


class ProgressUpdate(LibraryModel):
    """Playback progress as reported by the player"""
    content_id: int
    content_type: ContentType
    title: str
    poster_path: Optional[str] = None
    progress: float = Field(..., ge=0.0, le=100.0, description="Percentage watched")
    duration_seconds: int = Field(0, ge=0)
    provider: str

    @property
    def identity(self) -> Tuple[int, str]:
        return self.content_id, self.content_type


class WatchProgress(ProgressUpdate):
    """Continue-watching record; last_watched is refreshed on every update"""
    last_watched: datetime


class LoadStatus(str, Enum):
    OK = "ok"
    MISSING = "missing"
    CORRUPT = "corrupt"
    UNAVAILABLE = "unavailable"


T = TypeVar("T")


@dataclass
class StoreResult(Generic[T]):
    """
    Value returned by a store together with how it was obtained.

    MISSING means nothing was stored yet, CORRUPT means the stored payload
    could not be parsed and UNAVAILABLE means the key-value store failed.
    In every case ``value`` holds a usable (possibly empty/default) value.
    """
    value: T
    status: LoadStatus = LoadStatus.OK
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (LoadStatus.OK, LoadStatus.MISSING)
