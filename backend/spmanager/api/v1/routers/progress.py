# spmanager/api/v1/routers/progress.py
import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from spmanager.api.v1.deps import get_current_identity
from spmanager.config import settings
from spmanager.core.db import storage_call
from spmanager.core.errors import PayloadTooLargeError, ValidationError
from spmanager.core.security import TokenIdentity
from spmanager.repositories.progress_repository import ProgressRepository
from spmanager.schemas.progress import SaveProgressResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


async def _read_progress_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        raise ValidationError("EMPTY_PROGRESS", "No progress data to save")
    if len(raw) > settings.max_progress_bytes:
        raise PayloadTooLargeError("PROGRESS_TOO_LARGE", "Progress data is too large")
    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationError("INVALID_JSON", "Progress data must be valid JSON")
    if data is None:
        raise ValidationError("EMPTY_PROGRESS", "No progress data to save")
    # Only containers are stored; the JSON column treats bare strings as encoded JSON
    if not isinstance(data, (dict, list)):
        raise ValidationError("INVALID_PROGRESS", "Progress data must be a JSON object or array")
    return data


@router.get("")
async def get_progress(identity: TokenIdentity = Depends(get_current_identity)):
    """
    Return the authenticated user's progress document.

    If the user has no document yet (e.g. created outside registration) the
    default one is written first and returned.
    """
    progress, _ = await storage_call(ProgressRepository().get_or_init(identity.id), name="progress.get")
    return progress.data


@router.post("", response_model=SaveProgressResponse)
async def save_progress(request: Request, identity: TokenIdentity = Depends(get_current_identity)):
    """
    Replace the authenticated user's progress document with the request body.

    Error codes:
        - EMPTY_PROGRESS / INVALID_JSON / INVALID_PROGRESS (400)
        - PROGRESS_TOO_LARGE (413)
    """
    data = await _read_progress_body(request)
    await storage_call(ProgressRepository().put(identity.id, data), name="progress.put")
    logger.info("[progress] saved for user_id=%s (%s)", identity.id, identity.username)
    return SaveProgressResponse()
