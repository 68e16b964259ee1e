"""
Songs API — /songs Route Handler
==================================

What:  Handles GET /songs?title=<t> (lookup) and POST /songs (create).
How:   Validates presence per method, delegates to SongService, returns JSON.

PUT, PATCH and DELETE are routed here so they reach the validator and get
its 405 JSON error. Any other method (OPTIONS, TRACE, HEAD, custom verbs)
is rejected by the router; main.py turns that 405 into the same error.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from songs_api.schemas.song import ErrorResponse, MessageResponse, SongResponse
from songs_api.services.song_service import song_service
from songs_api.services.song_store import SongStore, get_song_store
from songs_api.validation import RequestRules, validate_request

router = APIRouter(tags=["Songs"])

SONG_RULES = {
    "GET": RequestRules(params=["title"]),
    "POST": RequestRules(body=["title", "artist", "album", "released", "genres"]),
}

SONGS_PATH = "/songs"

ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route(
    SONGS_PATH,
    methods=ROUTED_METHODS,
    responses={
        200: {"description": "Song found (GET)", "model": SongResponse},
        201: {"description": "Song stored, body echoed (POST)"},
        400: {"description": "Missing param or field", "model": ErrorResponse},
        404: {"description": "Title not found", "model": MessageResponse},
        405: {"description": "Method not allowed", "model": ErrorResponse},
        500: {"description": "Write failed", "model": ErrorResponse},
    },
    summary="Look up a song by title, or store a song",
)
async def songs(
    request: Request,
    store: SongStore = Depends(get_song_store),
) -> JSONResponse:
    """
    Dispatch on method after validation.

    GET:  requires query param `title`; 200 with the five fields or 404.
    POST: requires body fields title, artist, album, released, genres;
          201 echoing the submitted body, or 500 if the write failed.
    """
    body = await validate_request(request, SONG_RULES)

    if request.method == "POST":
        created = await song_service.create_song(store=store, body=body)
        return JSONResponse(status_code=201, content=created)

    song = await song_service.get_song(store=store, title=request.query_params["title"])
    return JSONResponse(status_code=200, content=song.model_dump())
