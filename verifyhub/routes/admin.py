"""
Admin endpoints.

POST /api/admin/login    -- email + password -> token (JSON body and cookie)
POST /api/admin/logout   -- clears the cookie
GET  /api/admin/me       -- who am I
GET  /api/admin/results  -- every session, newest update first

Tokens are stateless, so logout only clears the browser cookie; a copied
token stays valid until it ages out.
"""

from fastapi import APIRouter, Depends, Response

from verifyhub.auth import COOKIE_NAME, AdminGate, require_admin
from verifyhub.dependencies import get_admin_gate, get_store
from verifyhub.models.schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    AdminMe,
    AdminResultItem,
    AdminResults,
    ErrorResponse,
    OkResponse,
)
from verifyhub.store import SessionStore

router = APIRouter(prefix="/api/admin", tags=["Admin"])

_auth_errors = {
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    403: {"model": ErrorResponse, "description": "Token is not for the configured admin"},
}


@router.post(
    "/login",
    response_model=AdminLoginResponse,
    summary="Admin login",
    responses={
        400: {"model": ErrorResponse, "description": "Missing credentials"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Email is not the admin"},
    },
)
async def login(
    request: AdminLoginRequest,
    response: Response,
    gate: AdminGate = Depends(get_admin_gate),
) -> AdminLoginResponse:
    token = gate.login(request.email, request.password)
    response.set_cookie(COOKIE_NAME, token, httponly=True, path="/", samesite="lax")
    return AdminLoginResponse(ok=True, token=token)


@router.post("/logout", response_model=OkResponse, summary="Admin logout")
async def logout(response: Response) -> OkResponse:
    response.delete_cookie(COOKIE_NAME, path="/", httponly=True, samesite="lax")
    return OkResponse()


@router.get("/me", response_model=AdminMe, summary="Current admin", responses=_auth_errors)
async def me(email: str = Depends(require_admin)) -> AdminMe:
    return AdminMe(email=email)


@router.get(
    "/results",
    response_model=AdminResults,
    summary="List all sessions",
    description="Every stored session, including vendorData, sorted by updatedAt (newest first).",
    responses=_auth_errors,
)
async def results(
    _admin: str = Depends(require_admin),
    store: SessionStore = Depends(get_store),
) -> AdminResults:
    items = [
        AdminResultItem(
            session_id=session_id,
            status=record["status"],
            decision=record["decision"],
            age=record.get("age"),
            dob=record.get("dob"),
            updated_at=record["updatedAt"],
            vendor_data=record.get("vendorData"),
            ref_code=record.get("refCode"),
        )
        for session_id, record in store.all()
    ]
    # ISO timestamps with fixed precision sort correctly as strings
    items.sort(key=lambda item: item.updated_at or "", reverse=True)
    return AdminResults(count=len(items), items=items)
