"""Session lifecycle, incoming messages, view model and scan preview endpoints."""

import uuid

from fastapi import APIRouter, HTTPException, Request

from backend.host import deliver_message, load_stage, start_session
from portrait_stage.balance import extract_balance
from portrait_stage.models import IncomingMessage
from portrait_stage.roster import resolve_roster
from portrait_stage.scanner import scan_attributions
from portrait_stage.storage import Storage

from .models import CreateSession, ScanBody, ScanHit

router = APIRouter()


def _storage(request: Request) -> Storage:
    return request.app.state.storage


@router.get("/sessions")
async def list_sessions(request: Request):
    """List all sessions."""
    return _storage(request).list_sessions()


@router.post("/sessions", status_code=201)
async def create_session(request: Request, body: CreateSession):
    """Start a session: run the stage's load hook and persist the initial state."""
    session_id = body.session_id or body.title or uuid.uuid4().hex[:8]
    try:
        meta, stage, ready = await start_session(
            _storage(request), session_id, body.config,
            title=body.title, bot_name=body.bot_name,
        )
    except FileExistsError as e:
        raise HTTPException(409, str(e))
    return {
        "session_id": meta["session_id"],
        "ready": ready,
        "state": stage.state.model_dump(by_alias=True),
    }


@router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    """Session metadata plus its current state."""
    storage = _storage(request)
    meta = storage.get_session(session_id)
    if not meta:
        raise HTTPException(404, "Session not found")
    state = storage.get_state(session_id)
    return {**meta, "state": state.model_dump(by_alias=True) if state else None}


@router.delete("/sessions/{session_id}")
async def delete_session(request: Request, session_id: str):
    """Delete a session and all its data."""
    if not _storage(request).delete_session(session_id):
        raise HTTPException(404, "Session not found")
    return {"ok": True}


@router.get("/sessions/{session_id}/messages")
async def get_messages(request: Request, session_id: str):
    """Incoming message log for a session."""
    storage = _storage(request)
    if not storage.get_session(session_id):
        raise HTTPException(404, "Session not found")
    return [m.model_dump(by_alias=True, exclude_none=True) for m in storage.get_messages(session_id)]


@router.post("/sessions/{session_id}/messages")
async def post_message(request: Request, session_id: str, message: IncomingMessage):
    """Deliver an incoming chat message and return the updated view model."""
    view = await deliver_message(_storage(request), session_id, message)
    if view is None:
        raise HTTPException(404, "Session not found")
    return view.model_dump(by_alias=True)


@router.get("/sessions/{session_id}/view")
async def get_view(request: Request, session_id: str):
    """What the portrait panel should show right now."""
    stage = load_stage(_storage(request), session_id)
    if stage is None:
        raise HTTPException(404, "Session not found")
    return stage.view_model().model_dump(by_alias=True)


@router.post("/sessions/{session_id}/scan")
async def scan_preview(request: Request, session_id: str, body: ScanBody):
    """Show which lines would attribute speakers and what balance would be read.

    Dry run: the session state is not touched.
    """
    stage = load_stage(_storage(request), session_id)
    if stage is None:
        raise HTTPException(404, "Session not found")
    roster = resolve_roster(stage.config)
    hits = [
        ScanHit(entity=a.entity, candidate=a.candidate, remainder=a.remainder, line_no=a.line_no)
        for a in scan_attributions(body.text, roster)
    ]
    pattern = body.balance_regex or stage.config.balance_regex
    return {
        "hits": [h.model_dump(by_alias=True) for h in hits],
        "balance": extract_balance(body.text, pattern, None),
    }
