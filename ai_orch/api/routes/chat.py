import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, HTTPException, Request

from ai_orch.common.errors import PoolExhaustedError, SessionNotFoundError
from ai_orch.common.models import (
    ChatInput,
    ChatReply,
    Message,
    RenameRequest,
    SessionSummary,
)
from ai_orch.engine.session import UNTITLED

logger = logging.getLogger("ai_orch")

router = APIRouter()


@router.get("/v1/sessions", response_model=List[SessionSummary])
async def handle_list_sessions(request: Request):
    return await request.app.state.chat_service.session_manager.list_sessions()


@router.post("/v1/sessions", response_model=SessionSummary, status_code=201)
async def handle_create_session(request: Request):
    """Allocates a new session id. The session file is written on the first answered turn."""
    session_manager = request.app.state.chat_service.session_manager
    return SessionSummary(id=session_manager.generate_id(), title=session_manager.default_title)


@router.get("/v1/sessions/{session_id}/history", response_model=List[Message])
async def handle_get_history(session_id: str, request: Request):
    try:
        return await request.app.state.chat_service.session_manager.load_history(session_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/v1/sessions/{session_id}", response_model=SessionSummary)
async def handle_rename_session(session_id: str, req: RenameRequest, request: Request):
    session_manager = request.app.state.chat_service.session_manager
    try:
        await session_manager.rename(session_id, req.title)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionSummary(id=session_id, title=req.title.strip() or UNTITLED)


@router.post("/v1/sessions/{session_id}/messages", response_model=ChatReply)
async def handle_session_message(session_id: str, req: ChatInput, request: Request):
    """Runs one turn: a slash command, or a prompt routed through the failover chain."""
    try:
        return await request.app.state.chat_service.handle_input(session_id, req.input)
    except PoolExhaustedError as e:
        logger.error(f"Session {session_id}: {e}")
        raise HTTPException(
            status_code=503,
            detail={
                "error": str(e),
                "attempts": [asdict(attempt) for attempt in e.attempts],
            },
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
