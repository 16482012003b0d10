"""Sessions router for agent session lifecycle and prompting.

This module provides REST API endpoints for:
- Creating new sessions (one remote thread each)
- Listing and retrieving live sessions
- Sending prompts and waiting for the agent's reply
- Closing sessions
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from assistant_bridge.dependencies import get_session_manager
from assistant_bridge.errors import (
    RunFailed,
    RunTimedOut,
    SessionCloseFailed,
    SessionCreateFailed,
    SessionNotFoundError,
    TransportFailed,
)
from assistant_bridge.models.sessions import (
    PromptRequest,
    PromptResponse,
    SessionListResponse,
    SessionResponse,
)
from assistant_bridge.sessions import AgentSession, SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def _session_response(session: AgentSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        created_at=session.created_at,
        updated_at=session.updated_at,
        prompt_count=session.prompt_count,
        capabilities=session.capability_names,
    )


def _lookup(session_manager: SessionManager, session_id: str) -> AgentSession:
    try:
        return session_manager.get_session(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new session",
)
async def create_session(
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionResponse:
    """Create a new agent session.

    Raises:
        HTTPException: 502 if the remote thread could not be created
    """
    try:
        session = await session_manager.create_session()
    except SessionCreateFailed as e:
        logger.error(f"Failed to create session: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to create session: {e}",
        )
    return _session_response(session)


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List live sessions",
)
async def list_sessions(
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionListResponse:
    """List live sessions, most recently used first."""
    return SessionListResponse(
        sessions=[_session_response(s) for s in session_manager.list_sessions()]
    )


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get a session",
)
async def get_session(
    session_id: str,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionResponse:
    """Get a live session.

    Raises:
        HTTPException: 404 if the session doesn't exist
    """
    return _session_response(_lookup(session_manager, session_id))


@router.post(
    "/{session_id}/prompt",
    response_model=PromptResponse,
    summary="Send a prompt and wait for the reply",
)
async def send_prompt(
    session_id: str,
    request: PromptRequest,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> PromptResponse:
    """Send a prompt to a session and wait for the agent's reply.

    Capabilities requested by the agent are executed while waiting.

    Raises:
        HTTPException: 404 if the session doesn't exist
        HTTPException: 409 if the session is closed
        HTTPException: 504 if the run timed out
        HTTPException: 502 if the run failed or the remote service is unreachable
    """
    session = _lookup(session_manager, session_id)
    if session.closed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Session {session_id} is closed",
        )

    try:
        reply = await session.send_prompt(request.prompt)
    except RunTimedOut as e:
        logger.warning(f"Prompt on session {session_id} timed out: {e}")
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(e))
    except (RunFailed, TransportFailed) as e:
        logger.error(f"Prompt on session {session_id} failed: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return PromptResponse(session_id=session_id, reply=reply)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close a session",
)
async def close_session(
    session_id: str,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Response:
    """Close a session and delete its remote thread.

    Raises:
        HTTPException: 404 if the session doesn't exist
        HTTPException: 502 if the remote thread could not be deleted
    """
    try:
        await session_manager.close_session(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SessionCloseFailed as e:
        logger.error(f"Failed to close session {session_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return Response(status_code=status.HTTP_204_NO_CONTENT)
