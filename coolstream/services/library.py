"""
User Library Stores
Watchlist, continue-watching and preferences kept per user in the key-value store
"""
import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from coolstream.core.config import settings
from coolstream.core.exceptions import StorageError, ValidationError
from coolstream.models.library import (
    LibraryModel,
    LoadStatus,
    ProgressUpdate,
    StoreResult,
    UserPreferences,
    WatchlistEntry,
    WatchlistItem,
    WatchProgress,
)
from coolstream.services.storage import KeyValueStore
from coolstream.utils.helpers import sanitize_user_id, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
RecordT = TypeVar("RecordT", bound=LibraryModel)

WATCHLIST_KEY = "watchlist"
CONTINUE_WATCHING_KEY = "continue_watching"
PREFERENCES_KEY = "preferences"

# Accept both attribute names and their camelCase aliases
_PREFERENCE_FIELDS: Dict[str, str] = {
    alias: name
    for name in UserPreferences.model_fields
    for alias in (name, to_camel(name))
}


def merge_preferences(base: UserPreferences, partial: Mapping[str, Any]) -> UserPreferences:
    """
    Overlay ``partial`` on ``base`` and validate the result.

    Unknown keys are ignored. Raises ValidationError if any supplied value
    is out of range or not one of the allowed choices.
    """
    merged = base.model_dump()
    for key, value in partial.items():
        name = _PREFERENCE_FIELDS.get(key)
        if name is not None:
            merged[name] = value

    try:
        return UserPreferences.model_validate(merged)
    except PydanticValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ValidationError(f"Invalid preference value for: {fields}") from e


def coerce_preferences(payload: Mapping[str, Any]) -> UserPreferences:
    """Stored fields over defaults; a stored field that fails validation keeps its default"""
    accepted = UserPreferences().model_dump()
    for key, value in payload.items():
        name = _PREFERENCE_FIELDS.get(key)
        if name is None:
            continue

        candidate = {**accepted, name: value}
        try:
            UserPreferences.model_validate(candidate)
        except PydanticValidationError:
            logger.warning("Ignoring invalid stored preference %s=%r", key, value)
            continue
        accepted = candidate

    return UserPreferences.model_validate(accepted)


class RecordListStore(Generic[RecordT]):
    """Ordered list of records stored as one JSON array under a single key"""

    logical_key: str = ""
    record_model: Type[RecordT]

    def __init__(self, kv: KeyValueStore, user_id: Optional[str] = None, clock: Optional[Clock] = None):
        self.kv = kv
        self.user_id = sanitize_user_id(user_id)
        self._clock = clock or utcnow

    @staticmethod
    def identity(record: RecordT) -> Tuple[int, str]:
        raise NotImplementedError

    def _decode(self, raw: Optional[str]) -> StoreResult[List[RecordT]]:
        if raw is None:
            return StoreResult([], LoadStatus.MISSING)

        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Corrupt {self.logical_key} payload for user {self.user_id}: {e}")
            return StoreResult([], LoadStatus.CORRUPT, str(e))

        if not isinstance(payload, list):
            logger.warning(f"Corrupt {self.logical_key} payload for user {self.user_id}: not a list")
            return StoreResult([], LoadStatus.CORRUPT, "expected a list")

        records = []
        for entry in payload:
            try:
                records.append(self.record_model.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Dropping malformed %s entry for user %s", self.logical_key, self.user_id)

        dropped = len(payload) - len(records)
        if dropped:
            return StoreResult(records, LoadStatus.CORRUPT, f"dropped {dropped} malformed entries")
        return StoreResult(records)

    def _encode(self, records: List[RecordT]) -> str:
        return json.dumps([record.model_dump(mode="json", by_alias=True) for record in records])

    async def load(self) -> StoreResult[List[RecordT]]:
        """Read the list along with how it was obtained"""
        try:
            raw = await self.kv.read(self.user_id, self.logical_key)
        except StorageError as e:
            logger.error(f"Storage unavailable reading {self.logical_key}: {e}")
            return StoreResult([], LoadStatus.UNAVAILABLE, str(e))
        return self._decode(raw)

    async def list(self) -> List[RecordT]:
        """Read the list; empty when missing, corrupt or unavailable"""
        return (await self.load()).value

    async def find(self, content_id: int, content_type: str) -> Optional[RecordT]:
        """Record with this identity, or None"""
        for record in await self.list():
            if self.identity(record) == (content_id, content_type):
                return record
        return None

    async def _mutate(
        self,
        change: Callable[[List[RecordT]], Optional[List[RecordT]]]
    ) -> StoreResult[List[RecordT]]:
        """
        Apply ``change`` to the stored list in one optimistic transaction.

        ``change`` returns the new list, or None when nothing changes. A write
        over a corrupt payload replaces it and the result stays CORRUPT so the
        caller learns that stored data was discarded.
        """
        outcome: Dict[str, StoreResult[List[RecordT]]] = {}

        def apply(raw: Optional[str]) -> Optional[str]:
            current = self._decode(raw)
            updated = change(current.value.copy())
            if updated is None:
                outcome["result"] = current
                return None
            if current.status == LoadStatus.CORRUPT:
                outcome["result"] = StoreResult(
                    updated, LoadStatus.CORRUPT, f"replaced corrupt payload: {current.detail}"
                )
            else:
                outcome["result"] = StoreResult(updated)
            return self._encode(updated)

        try:
            await self.kv.update(self.user_id, self.logical_key, apply)
        except StorageError as e:
            logger.error(f"Storage unavailable updating {self.logical_key}: {e}")
            return StoreResult([], LoadStatus.UNAVAILABLE, str(e))
        return outcome["result"]

    async def remove(self, content_id: int, content_type: str) -> StoreResult[List[RecordT]]:
        """Remove the record with this identity; no-op if absent"""
        target = (content_id, content_type)

        def change(records: List[RecordT]) -> Optional[List[RecordT]]:
            kept = [record for record in records if self.identity(record) != target]
            return kept if len(kept) != len(records) else None

        return await self._mutate(change)

    async def clear(self) -> bool:
        """Drop the whole list"""
        try:
            await self.kv.remove(self.user_id, self.logical_key)
            return True
        except StorageError as e:
            logger.error(f"Storage unavailable clearing {self.logical_key}: {e}")
            return False


class WatchlistStore(RecordListStore[WatchlistItem]):
    """Saved items, newest first, at most one per (id, type)"""

    logical_key = WATCHLIST_KEY
    record_model = WatchlistItem

    @staticmethod
    def identity(record: WatchlistItem) -> Tuple[int, str]:
        return record.identity

    async def add(self, entry: WatchlistEntry) -> StoreResult[List[WatchlistItem]]:
        """
        Add an item to the front of the watchlist

        Re-adding an existing (id, type) changes nothing, so the original
        added_at is kept.
        """
        def change(items: List[WatchlistItem]) -> Optional[List[WatchlistItem]]:
            if any(item.identity == entry.identity for item in items):
                return None

            data = entry.model_dump(include=set(WatchlistEntry.model_fields))
            item = WatchlistItem.model_validate({**data, "added_at": self._clock()})
            return [item] + items

        return await self._mutate(change)

    async def contains(self, content_id: int, content_type: str) -> bool:
        return await self.find(content_id, content_type) is not None


class ContinueWatchingStore(RecordListStore[WatchProgress]):
    """Playback progress, most recently updated first, capacity-bounded"""

    logical_key = CONTINUE_WATCHING_KEY
    record_model = WatchProgress

    def __init__(
        self,
        kv: KeyValueStore,
        user_id: Optional[str] = None,
        clock: Optional[Clock] = None,
        capacity: Optional[int] = None,
    ):
        super().__init__(kv, user_id, clock)
        self.capacity = capacity if capacity is not None else settings.CONTINUE_WATCHING_LIMIT

    @staticmethod
    def identity(record: WatchProgress) -> Tuple[int, str]:
        return record.identity

    async def upsert(self, update: ProgressUpdate) -> StoreResult[List[WatchProgress]]:
        """
        Record playback progress

        An existing entry is replaced where it stands; a new one goes to the
        front. The list is then cut to capacity, dropping from the tail.
        """
        def change(records: List[WatchProgress]) -> List[WatchProgress]:
            data = update.model_dump(include=set(ProgressUpdate.model_fields))
            record = WatchProgress.model_validate({**data, "last_watched": self._clock()})

            for index, existing in enumerate(records):
                if existing.identity == record.identity:
                    records[index] = record
                    break
            else:
                records.insert(0, record)

            return records[:self.capacity]

        return await self._mutate(change)

    async def get(self, content_id: int, content_type: str) -> Optional[WatchProgress]:
        """Progress for one title, used to resume playback"""
        return await self.find(content_id, content_type)


class PreferenceStore:
    """Single preferences record per user, always fully populated on read"""

    logical_key = PREFERENCES_KEY

    def __init__(self, kv: KeyValueStore, user_id: Optional[str] = None):
        self.kv = kv
        self.user_id = sanitize_user_id(user_id)

    def _decode(self, raw: Optional[str]) -> StoreResult[UserPreferences]:
        if raw is None:
            return StoreResult(UserPreferences(), LoadStatus.MISSING)

        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Corrupt preferences payload for user {self.user_id}: {e}")
            return StoreResult(UserPreferences(), LoadStatus.CORRUPT, str(e))

        if not isinstance(payload, dict):
            logger.warning(f"Corrupt preferences payload for user {self.user_id}: not an object")
            return StoreResult(UserPreferences(), LoadStatus.CORRUPT, "expected an object")

        return StoreResult(coerce_preferences(payload))

    async def load(self) -> StoreResult[UserPreferences]:
        try:
            raw = await self.kv.read(self.user_id, self.logical_key)
        except StorageError as e:
            logger.error(f"Storage unavailable reading preferences: {e}")
            return StoreResult(UserPreferences(), LoadStatus.UNAVAILABLE, str(e))
        return self._decode(raw)

    async def get(self) -> UserPreferences:
        """Effective preferences; defaults when nothing usable is stored"""
        return (await self.load()).value

    async def update(self, partial: Mapping[str, Any]) -> StoreResult[UserPreferences]:
        """
        Merge ``partial`` over the effective preferences and store the full record

        Raises:
            ValidationError: a supplied value is not allowed (nothing is stored)
        """
        outcome: Dict[str, UserPreferences] = {}

        def apply(raw: Optional[str]) -> str:
            merged = merge_preferences(self._decode(raw).value, partial)
            outcome["value"] = merged
            return merged.model_dump_json(by_alias=True)

        try:
            await self.kv.update(self.user_id, self.logical_key, apply)
        except StorageError as e:
            logger.error(f"Storage unavailable updating preferences: {e}")
            return StoreResult(UserPreferences(), LoadStatus.UNAVAILABLE, str(e))
        return StoreResult(outcome["value"])


class UserLibrary:
    """All stores for one user namespace"""

    def __init__(self, kv: KeyValueStore, user_id: Optional[str] = None, clock: Optional[Clock] = None):
        self.kv = kv
        self.user_id = sanitize_user_id(user_id)
        self.watchlist = WatchlistStore(kv, self.user_id, clock)
        self.continue_watching = ContinueWatchingStore(kv, self.user_id, clock)
        self.preferences = PreferenceStore(kv, self.user_id)

    async def clear_all(self) -> bool:
        """Delete every record for this user"""
        try:
            await self.kv.remove(self.user_id, WATCHLIST_KEY, CONTINUE_WATCHING_KEY, PREFERENCES_KEY)
        except StorageError as e:
            logger.error(f"Storage unavailable clearing library for {self.user_id}: {e}")
            return False

        logger.info(f"Cleared library for user {self.user_id}")
        return True
