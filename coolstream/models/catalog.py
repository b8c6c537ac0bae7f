"""
Catalog Models
Normalized movie and TV records returned by the catalog proxy
"""
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# TMDB genre ids and their display names
MOVIE_GENRES: Dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

TV_GENRES: Dict[int, str] = {
    10759: "Action & Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    10762: "Kids",
    9648: "Mystery",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
    37: "Western",
}


class CatalogModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StreamingUrls(CatalogModel):
    """Embed URL per streaming provider"""
    vidsrc: str
    viking_embed: str
    filmku: str


class Genre(CatalogModel):
    id: int
    name: str


class CastMember(CatalogModel):
    id: int
    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None


class CrewMember(CatalogModel):
    id: int
    name: str
    job: str
    department: Optional[str] = None


class Video(CatalogModel):
    id: str
    key: str
    name: str
    site: str
    type: str


class SimilarMovie(CatalogModel):
    id: int
    title: str
    poster_url: Optional[str] = None
    vote_average: float = 0.0


class SimilarShow(CatalogModel):
    id: int
    name: str
    poster_url: Optional[str] = None
    vote_average: float = 0.0


class Movie(CatalogModel):
    """Movie as listed by search, trending and popular"""
    id: int
    title: str = ""
    overview: str = ""
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: List[int] = Field(default_factory=list)
    genre_names: List[str] = Field(default_factory=list)
    streaming_urls: StreamingUrls


class MovieDetail(Movie):
    runtime: Optional[int] = None
    genres: List[Genre] = Field(default_factory=list)
    production_companies: List[Dict[str, Any]] = Field(default_factory=list)
    budget: Optional[int] = None
    revenue: Optional[int] = None
    tagline: Optional[str] = None
    status: Optional[str] = None
    cast: List[CastMember] = Field(default_factory=list)
    crew: List[CrewMember] = Field(default_factory=list)
    videos: List[Video] = Field(default_factory=list)
    similar: List[SimilarMovie] = Field(default_factory=list)


class TVShow(CatalogModel):
    """TV show as listed by search, trending and popular"""
    id: int
    name: str = ""
    overview: str = ""
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    first_air_date: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: List[int] = Field(default_factory=list)
    genre_names: List[str] = Field(default_factory=list)
    origin_country: List[str] = Field(default_factory=list)
    streaming_urls: StreamingUrls


class TVShowDetail(TVShow):
    genres: List[Genre] = Field(default_factory=list)
    number_of_seasons: Optional[int] = None
    number_of_episodes: Optional[int] = None
    episode_run_time: List[int] = Field(default_factory=list)
    created_by: List[Dict[str, Any]] = Field(default_factory=list)
    tagline: Optional[str] = None
    status: Optional[str] = None
    cast: List[CastMember] = Field(default_factory=list)
    crew: List[CrewMember] = Field(default_factory=list)
    videos: List[Video] = Field(default_factory=list)
    similar: List[SimilarShow] = Field(default_factory=list)


ItemT = TypeVar("ItemT")


class PagedResponse(CatalogModel, Generic[ItemT]):
    """One page of normalized results"""
    results: List[ItemT]
    total_results: int = 0
    total_pages: int = 0
    page: int = 1
