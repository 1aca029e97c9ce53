"""
NoteTaker Backend: Notes Route Handlers
========================================

What:  GET /notes, GET /notes/{note_id}, POST /notes, POST /notes/reset.
How:   Extracts request input, delegates to NoteService, returns its result.
       Handlers never catch errors; the failure policy in main.py turns any
       raised exception into the fixed 500 response.

Input handling:
    - GET /notes/{note_id} reads the identifier from the `id` query
      parameter. The path segment is accepted but not used.
    - POST /notes takes `title` and `contents` from a JSON body or a form
      body. Fields are not validated; absent fields are stored as NULL.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from notetaker.exceptions import RequestBodyError
from notetaker.schemas.note import NoteResponse, ResetResponse
from notetaker.services.note_service import NoteService, get_note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_note_fields(request: Request) -> Dict[str, Optional[str]]:
    """
    Pull `title` and `contents` out of the POST body.

    JSON bodies are decoded when the Content-Type says JSON; form bodies
    (urlencoded or multipart) when it says form; multipart file parts are
    ignored. Any other content type, or an empty body, yields no fields.

    Raises:
        RequestBodyError: The body claims to be JSON but does not decode.
    """
    content_type = request.headers.get("content-type", "")
    data: Any = {}

    if content_type.lower().startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        # File parts are not note text; only plain string fields count
        data = {key: value for key, value in form.items() if isinstance(value, str)}
    elif _is_json(content_type):
        raw = await request.body()
        if raw.strip():
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise RequestBodyError(
                    content_type=content_type,
                    context={"error": str(e)},
                ) from e

    if not isinstance(data, dict):
        data = {}

    logger.debug("Request body fields: %s", sorted(data))
    return {
        "title": _as_text(data.get("title")),
        "contents": _as_text(data.get("contents")),
    }


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    summary="List all notes",
    description="Returns every stored note. No pagination, sorting or filtering.",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return await service.list_notes()


@router.get(
    "/notes/{note_id}",
    response_model=List[NoteResponse],
    summary="Get a single note",
    description=(
        "Looks up a note by the `id` query parameter and returns a list with "
        "zero or one notes. The path segment is not used for the lookup."
    ),
)
async def get_note(
    request: Request,
    note_id: str,
    note_key: Optional[str] = Query(
        default=None,
        alias="id",
        description="Identifier of the note to fetch",
    ),
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    """
    Fetch one note.

    An unknown id is answered with 200 and an empty list. A missing or
    non-integer id fails the lookup (500).
    """
    logger.debug("Request params: %s", dict(request.path_params))
    logger.debug("Request query: %s", dict(request.query_params))

    return await service.get_note(note_key)


@router.post(
    "/notes",
    response_model=NoteResponse,
    summary="Create a note",
    description=(
        "Stores `title` and `contents` from a JSON or form-encoded body and "
        "returns the note as persisted. Responds 200, not 201."
    ),
)
async def create_note(
    fields: Dict[str, Optional[str]] = Depends(read_note_fields),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.create_note(fields["title"], fields["contents"])


@router.post(
    "/notes/reset",
    response_model=ResetResponse,
    summary="Delete every note",
    description="Truncates the notes table and restarts identifiers at 1.",
)
async def reset_notes(
    service: NoteService = Depends(get_note_service),
) -> ResetResponse:
    return await service.reset_notes()
