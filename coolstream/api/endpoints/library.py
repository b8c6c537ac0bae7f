"""
Library Endpoints
Watchlist, continue-watching and preferences for the active access key
"""
import logging
from typing import Any, Dict, List, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Path

from coolstream.api.deps import get_library
from coolstream.core.exceptions import ValidationError
from coolstream.models.library import LibraryModel, ProgressUpdate, StoreResult, WatchlistEntry
from coolstream.services.library import UserLibrary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/library", tags=["library"])

ContentTypePath = Literal["movie", "tv"]


def list_payload(result: StoreResult[List[LibraryModel]]) -> Dict[str, Any]:
    return {
        "items": [record.model_dump(mode="json", by_alias=True) for record in result.value],
        "status": result.status.value,
    }


@router.get("/watchlist")
async def get_watchlist(library: UserLibrary = Depends(get_library)):
    """Saved items, newest first"""
    return list_payload(await library.watchlist.load())


@router.post("/watchlist")
async def add_to_watchlist(entry: WatchlistEntry, library: UserLibrary = Depends(get_library)):
    """Save an item; saving it again changes nothing"""
    return list_payload(await library.watchlist.add(entry))


@router.get("/watchlist/{content_type}/{content_id}")
async def watchlist_contains(
    content_type: ContentTypePath = Path(...),
    content_id: int = Path(...),
    library: UserLibrary = Depends(get_library),
):
    return {"inWatchlist": await library.watchlist.contains(content_id, content_type)}


@router.delete("/watchlist/{content_type}/{content_id}")
async def remove_from_watchlist(
    content_type: ContentTypePath = Path(...),
    content_id: int = Path(...),
    library: UserLibrary = Depends(get_library),
):
    return list_payload(await library.watchlist.remove(content_id, content_type))


@router.get("/continue-watching")
async def get_continue_watching(library: UserLibrary = Depends(get_library)):
    """Titles in progress, most recently watched first"""
    return list_payload(await library.continue_watching.load())


@router.put("/continue-watching")
async def update_progress(update: ProgressUpdate, library: UserLibrary = Depends(get_library)):
    """Record playback progress for a title"""
    return list_payload(await library.continue_watching.upsert(update))


@router.get("/continue-watching/{content_type}/{content_id}")
async def get_progress(
    content_type: ContentTypePath = Path(...),
    content_id: int = Path(...),
    library: UserLibrary = Depends(get_library),
):
    record = await library.continue_watching.get(content_id, content_type)
    if record is None:
        raise HTTPException(status_code=404, detail="No progress recorded")
    return record.model_dump(mode="json", by_alias=True)


@router.delete("/continue-watching/{content_type}/{content_id}")
async def remove_progress(
    content_type: ContentTypePath = Path(...),
    content_id: int = Path(...),
    library: UserLibrary = Depends(get_library),
):
    return list_payload(await library.continue_watching.remove(content_id, content_type))


@router.get("/preferences")
async def get_preferences(library: UserLibrary = Depends(get_library)):
    result = await library.preferences.load()
    return {
        "preferences": result.value.model_dump(by_alias=True),
        "status": result.status.value,
    }


@router.patch("/preferences")
async def update_preferences(
    changes: Dict[str, Any] = Body(..., description="Preference fields to change"),
    library: UserLibrary = Depends(get_library),
):
    """Merge the given fields into the stored preferences"""
    try:
        result = await library.preferences.update(changes)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "preferences": result.value.model_dump(by_alias=True),
        "status": result.status.value,
    }


@router.delete("")
async def clear_library(library: UserLibrary = Depends(get_library)):
    """Remove every record stored for the active access key"""
    cleared = await library.clear_all()
    if not cleared:
        logger.warning(f"Library clear failed for user {library.user_id}")
    return {"cleared": cleared}
