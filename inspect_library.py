#!/usr/bin/env python3
"""
Inspect the library stored for one access key
"""
import asyncio
import os

from coolstream.core.config import settings
from coolstream.services.library import UserLibrary
from coolstream.services.storage import KeyValueStore


async def inspect_library():
    """Print watchlist, continue-watching and preferences with their load status"""

    access_key = os.environ.get("ACCESS_KEY") or settings.DEFAULT_USER_ID

    kv = KeyValueStore()
    library = UserLibrary(kv, access_key)

    try:
        print(f"Redis: {settings.REDIS_URL}")
        print(f"Namespace: {kv.namespaced(access_key, '*')}")
        print("=" * 80)

        watchlist = await library.watchlist.load()
        print(f"\nWatchlist ({watchlist.status.value}): {len(watchlist.value)} items")
        for i, item in enumerate(watchlist.value[:10], 1):
            print(f"  {i}. [{item.type}] {item.title} (id {item.id}, added {item.added_at:%Y-%m-%d %H:%M})")
        if watchlist.detail:
            print(f"  detail: {watchlist.detail}")

        progress = await library.continue_watching.load()
        print(f"\nContinue watching ({progress.status.value}): {len(progress.value)} items")
        for i, record in enumerate(progress.value[:10], 1):
            print(f"  {i}. [{record.content_type}] {record.title}: {record.progress:.0f}% via {record.provider}")
        if progress.detail:
            print(f"  detail: {progress.detail}")

        preferences = await library.preferences.load()
        print(f"\nPreferences ({preferences.status.value}):")
        for key, value in preferences.value.model_dump(by_alias=True).items():
            print(f"  {key}: {value}")

        print("\n" + "=" * 80)

    finally:
        await kv.close()

if __name__ == "__main__":
    asyncio.run(inspect_library())
