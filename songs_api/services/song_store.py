"""
Songs API — Record Store Interface and DynamoDB Implementation
================================================================

What:  Point-get and point-put of song records in a DynamoDB table.
Why:   The store is the only system of record; keeping it behind a small
       interface lets the request pipeline run against a fake in tests.
How:   `SongStore` is the abstract contract. `DynamoDBSongStore` wraps an
       aioboto3 low-level client; `connect_dynamodb()` owns that client's
       lifetime and is entered once in the application lifespan.

Wire representation:
    Every attribute is sent with an explicit DynamoDB type tag:

        {"title":    {"S": "A"},
         "artist":   {"S": "B"},
         "album":    {"S": "C"},
         "released": {"N": "1999"},
         "genres":   {"S": "rock"}}

    Reads return each attribute's raw string, so `released` comes back as
    "1999" rather than 1999.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import aioboto3
from starlette.requests import Request

from songs_api.config import Settings
from songs_api.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

SONG_FIELDS = ("title", "artist", "album", "released", "genres")
NUMERIC_FIELDS = frozenset({"released"})

TypedItem = Dict[str, Dict[str, str]]


def song_to_item(song: Dict[str, Any]) -> TypedItem:
    """
    Encode the five song fields as a typed DynamoDB item.

    Fields beyond the five are not written. Values are sent as their
    string form; DynamoDB itself rejects a non-numeric `released`.
    """
    item: TypedItem = {}
    for name in SONG_FIELDS:
        type_tag = "N" if name in NUMERIC_FIELDS else "S"
        item[name] = {type_tag: str(song[name])}
    return item


def item_to_song(item: TypedItem) -> Dict[str, Optional[str]]:
    """Decode a typed item into the five song fields, keeping raw strings."""
    song: Dict[str, Optional[str]] = {}
    for name in SONG_FIELDS:
        attribute = item.get(name) or {}
        song[name] = next(iter(attribute.values()), None)
    return song


class SongStore(ABC):
    """
    Abstract interface for the song record store.

    Contract:
        - put_song() inserts or replaces the record keyed by song["title"]
          and returns the store's acknowledgement HTTP status code
        - get_song() returns the typed item for a title, or None on a miss
        - Implementations let store exceptions propagate; SongService
          decides how each maps to a response
    """

    @abstractmethod
    async def put_song(self, song: Dict[str, Any]) -> int:
        """Insert-or-replace one song. Returns the acknowledgement status code."""
        ...

    @abstractmethod
    async def get_song(self, title: str) -> Optional[TypedItem]:
        """Point lookup by exact title. Returns None when no record exists."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability probe used by GET /health."""
        ...


class DynamoDBSongStore(SongStore):
    """
    SongStore over an aioboto3 DynamoDB client.

    The client is created and closed by connect_dynamodb(); this class
    only issues calls against it. No retries or consistency options are
    set here, the client's defaults apply.
    """

    def __init__(self, client: Any, table_name: str):
        self.client = client
        self.table_name = table_name

    async def put_song(self, song: Dict[str, Any]) -> int:
        response = await self.client.put_item(
            TableName=self.table_name,
            Item=song_to_item(song),
        )
        status = response["ResponseMetadata"]["HTTPStatusCode"]
        logger.debug("put_item title=%r acknowledged with %s", song.get("title"), status)
        return status

    async def get_song(self, title: str) -> Optional[TypedItem]:
        response = await self.client.get_item(
            TableName=self.table_name,
            Key={"title": {"S": title}},
        )
        return response.get("Item")

    async def health_check(self) -> bool:
        """
        Check that the table is reachable with the configured credentials.

        How:     DescribeTable (metadata only, no read capacity consumed).
        Returns: True if the call succeeds, False otherwise.
        """
        try:
            await self.client.describe_table(TableName=self.table_name)
            return True
        except Exception as e:
            logger.warning("DynamoDB health check failed: %s", str(e))
            return False


class UnavailableSongStore(SongStore):
    """
    Stand-in used when the DynamoDB client could not be constructed.

    Every data operation raises StoreUnavailableError, so requests fail at
    call time exactly as they would with a misconfigured client.
    """

    def __init__(self, reason: str):
        self.reason = reason

    async def put_song(self, song: Dict[str, Any]) -> int:
        raise StoreUnavailableError(context={"reason": self.reason})

    async def get_song(self, title: str) -> Optional[TypedItem]:
        raise StoreUnavailableError(context={"reason": self.reason})

    async def health_check(self) -> bool:
        return False


@asynccontextmanager
async def connect_dynamodb(config: Settings) -> AsyncIterator[DynamoDBSongStore]:
    """
    Build one aioboto3 DynamoDB client from settings and yield a store on it.

    What:    Owns the client for the lifetime of the application.
    When:    Entered once in the FastAPI lifespan; exited on shutdown.
    Raises:  botocore errors such as NoRegionError when the client cannot
             be built. The lifespan catches these and falls back to
             UnavailableSongStore.
    """
    session = aioboto3.Session(
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        region_name=config.aws_table_region,
    )
    async with session.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint_url,
    ) as client:
        logger.info(
            "DynamoDB client ready (region=%s, table=%s%s)",
            config.aws_table_region,
            config.songs_table_name,
            f", endpoint={config.dynamodb_endpoint_url}" if config.dynamodb_endpoint_url else "",
        )
        yield DynamoDBSongStore(client, config.songs_table_name)
    logger.info("DynamoDB client closed")


def get_song_store(request: Request) -> SongStore:
    """
    FastAPI dependency that provides the application's SongStore.

    Usage in routes:
        @router.get("/songs")
        async def handler(store: SongStore = Depends(get_song_store)):
            ...

    The store is attached to `app.state` once (lifespan or create_app),
    so every request shares the same read-only client.
    """
    return request.app.state.song_store
