"""
GET /api/result/{session_id} -- Public view of one session.

Anyone holding the session id can read its status and age. vendorData is
never part of this view; that's for the admin listing only.
"""

from fastapi import APIRouter, Depends

from verifyhub.dependencies import get_store
from verifyhub.errors import NotFound
from verifyhub.models.schemas import ErrorResponse, PublicResult
from verifyhub.store import SessionStore

router = APIRouter()


@router.get(
    "/api/result/{session_id}",
    response_model=PublicResult,
    summary="Get a session result",
    responses={404: {"model": ErrorResponse}},
    tags=["Results"],
)
async def get_result(session_id: str, store: SessionStore = Depends(get_store)) -> PublicResult:
    record = store.get(session_id)
    if record is None:
        raise NotFound()

    return PublicResult(
        status=record["status"],
        decision=record["decision"],
        age=record.get("age"),
        dob=record.get("dob"),
        updated_at=record["updatedAt"],
        ref_code=record.get("refCode"),
    )
