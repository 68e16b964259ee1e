"""
Songs API — Song Service (Record Adapter)
===========================================

What:  Translates validated requests into one store call and the store's
       answer into a response payload.
Who:   Called by the /songs route handler; calls a SongStore.
When:  Once per GET or POST, after validation has passed.

Error Handling Strategy:
    GET:  a miss and a store exception both become SongNotFoundError (404).
          The log line records which of the two happened.
    POST: an acknowledgement other than 200, or any exception, becomes
          StoreWriteError (500). The cause is logged, never returned.

Design Decision:
    SongService is stateless. The store is passed into each call, so the
    same instance serves every request and tests can hand it a fake store.
"""

import logging
from typing import Any, Dict

from songs_api.exceptions import SongNotFoundError, StoreWriteError
from songs_api.schemas.song import SongResponse
from songs_api.services.song_store import SongStore, item_to_song

logger = logging.getLogger(__name__)

# DynamoDB acknowledges a successful PutItem with 200 (not 201)
WRITE_ACK_STATUS = 200


class SongService:
    """Business logic for the songs resource: get_song() and create_song()."""

    async def get_song(self, store: SongStore, title: str) -> SongResponse:
        """
        Look up one song by exact title.

        Raises:
            SongNotFoundError: no record, or the lookup itself failed
        """
        try:
            item = await store.get_song(title)
        except Exception as e:
            logger.error("Lookup of title %r failed: %s", title, str(e))
            raise SongNotFoundError(
                title=title,
                reason="store_error",
                context={"error_type": type(e).__name__},
            )

        if not item:
            logger.info("No song stored under title %r", title)
            raise SongNotFoundError(title=title, reason="missing")

        return SongResponse(**item_to_song(item))

    async def create_song(self, store: SongStore, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert or replace the song described by `body`.

        Returns:
            The submitted body, unchanged, for the 201 echo.

        Raises:
            StoreWriteError: acknowledgement was not 200 or the write raised
        """
        try:
            status = await store.put_song(body)
        except Exception as e:
            logger.error("Write of title %r failed: %s", body.get("title"), str(e))
            raise StoreWriteError(context={"error_type": type(e).__name__})

        if status != WRITE_ACK_STATUS:
            logger.error(
                "Write of title %r acknowledged with status %s", body.get("title"), status
            )
            raise StoreWriteError(context={"ack_status": status})

        logger.info("Stored song %r", body.get("title"))
        return body


# ── Singleton Instance ────────────────────────────────────────────────────
# Why singleton: SongService is stateless; the store is injected per call
song_service = SongService()
