"""Analysis session endpoints.

A session mirrors one results screen: submit an image, read the analysis,
fetch recommendations (cached until the next image), retry on failure.
"""

import logging
from collections import OrderedDict
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile

from outfit_advisor.core.session import AnalysisSession, SessionError

from .analyze import _dump, _image_uri, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


def _sessions(request: Request) -> OrderedDict[str, AnalysisSession]:
    return request.app.state.sessions


def _get_session(request: Request, session_id: str) -> AnalysisSession:
    sessions = _sessions(request)
    session = sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    sessions.move_to_end(session_id)
    return session


@router.post("/sessions")
async def create_session(request: Request):
    """Start an empty session in the idle state."""
    sessions = _sessions(request)
    limit = max(request.app.state.settings.max_sessions, 1)
    while len(sessions) >= limit:
        evicted, _ = sessions.popitem(last=False)
        logger.info("Evicted session %s", evicted, extra={"event": "session_evicted"})

    session = AnalysisSession(get_orchestrator(request))
    sessions[session.id] = session
    return session.snapshot()


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, request: Request):
    """Current state and analysis of a session."""
    return _get_session(request, session_id).snapshot()


@router.post("/sessions/{session_id}/image")
async def submit_image(
    session_id: str,
    request: Request,
    file: Optional[UploadFile] = File(None),
    image_url: Optional[str] = Form(None),
    image_base64: Optional[str] = Form(None),
):
    """Submit a new image; cached recommendations are discarded."""
    session = _get_session(request, session_id)

    if file:
        content = await file.read()
        await session.submit_upload(content, mime_type=file.content_type, filename=file.filename)
    else:
        await session.submit(_image_uri(image_url, image_base64))

    return session.snapshot()


@router.post("/sessions/{session_id}/retry")
async def retry_session(session_id: str, request: Request):
    """Resubmit the last image."""
    session = _get_session(request, session_id)
    try:
        await session.retry()
    except SessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.snapshot()


@router.get("/sessions/{session_id}/recommendations")
async def session_recommendations(session_id: str, request: Request):
    """Complete analysis for the current image."""
    session = _get_session(request, session_id)
    try:
        complete = await session.recommendations()
    except SessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _dump(complete)


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, request: Request):
    """Discard a session."""
    if session_id not in _sessions(request):
        raise HTTPException(status_code=404, detail="Session not found")

    del _sessions(request)[session_id]
    return {"message": "Session deleted"}
