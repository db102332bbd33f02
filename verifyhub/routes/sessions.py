"""
POST /api/create-session -- Start a verification.

In demo mode the session is created locally and the URL points at the
bundled demo completion page. In veriff mode the provider is called first
and its session id and URL are used; if that call fails nothing is stored
and the client gets a 500.
"""

from fastapi import APIRouter, Depends

from verifyhub.dependencies import get_sessions
from verifyhub.models.schemas import CreateSessionRequest, CreateSessionResponse, ErrorResponse
from verifyhub.sessions import SessionManager

router = APIRouter()


@router.post(
    "/api/create-session",
    response_model=CreateSessionResponse,
    summary="Create a verification session",
    responses={500: {"model": ErrorResponse, "description": "Provider call failed"}},
    tags=["Sessions"],
)
async def create_session(
    request: CreateSessionRequest | None = None,
    sessions: SessionManager = Depends(get_sessions),
) -> CreateSessionResponse:
    # An empty body is allowed; personId then falls back to the default
    created = await sessions.create(request.person_id if request else None)
    return CreateSessionResponse(**created)
