"""
Helper Utilities
URL templating and small shared functions
"""
from datetime import datetime, timezone
from typing import Optional

from coolstream.core.config import settings
from coolstream.models.catalog import StreamingUrls


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def build_image_url(path: Optional[str], size: str) -> Optional[str]:
    """
    Rewrite a TMDB image path to an absolute CDN URL

    Args:
        path: TMDB image path (e.g. "/abc.jpg"), may be None
        size: TMDB size segment (e.g. "w500")

    Returns:
        Absolute URL or None when there is no image
    """
    if not path:
        return None

    base = settings.TMDB_IMAGE_BASE_URL.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}/{size}{path}"


def build_streaming_urls(content_id: int, media_type: str) -> StreamingUrls:
    """
    Build embed URLs for every streaming provider

    vidsrc always names the media type; the other two providers only
    add a "tv/" segment for series.
    """
    tv_segment = "tv/" if media_type == "tv" else ""

    return StreamingUrls(
        vidsrc=f"{settings.VIDSRC_BASE_URL.rstrip('/')}/embed/{media_type}/{content_id}",
        viking_embed=f"{settings.VIKING_EMBED_BASE_URL.rstrip('/')}/play/{tv_segment}{content_id}",
        filmku=f"{settings.FILMKU_BASE_URL.rstrip('/')}/embed/{tv_segment}{content_id}",
    )


def sanitize_user_id(user_id: Optional[str]) -> str:
    """Trim an access key, falling back to the default namespace"""
    if not user_id:
        return settings.DEFAULT_USER_ID

    return user_id.strip() or settings.DEFAULT_USER_ID
