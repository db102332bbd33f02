"""
Decision callbacks.

POST /api/provider/webhook      -- called by the verification provider
POST /api/provider/demo-submit  -- called by the demo completion page

The webhook always answers 200 "ok" once the body parses, including for
session ids we don't know: a non-2xx would make the provider retry a
callback that can never succeed. Only a body that isn't a JSON object gets
a 500.

The webhook does NOT verify a provider signature; callbacks are trusted.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from verifyhub.dependencies import get_sessions
from verifyhub.errors import ServiceError
from verifyhub.models.schemas import DemoSubmitRequest, ErrorResponse, OkResponse
from verifyhub.sessions import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/api/provider/webhook",
    response_class=PlainTextResponse,
    summary="Provider decision webhook",
    tags=["Provider"],
)
async def provider_webhook(
    request: Request,
    sessions: SessionManager = Depends(get_sessions),
) -> PlainTextResponse:
    raw = await request.body()

    try:
        payload = json.loads(raw)
        sessions.apply_provider_decision(payload)
    except (ValueError, ServiceError) as e:
        logger.warning("Rejected malformed webhook body: %s", e)
        return PlainTextResponse("error", status_code=500)

    return PlainTextResponse("ok", status_code=200)


@router.post(
    "/api/provider/demo-submit",
    response_model=OkResponse,
    summary="Demo page decision",
    responses={400: {"model": ErrorResponse, "description": "Unknown session"}},
    tags=["Provider"],
)
async def demo_submit(
    request: DemoSubmitRequest,
    sessions: SessionManager = Depends(get_sessions),
) -> OkResponse:
    sessions.apply_demo_decision(request.session_id, request.decision, request.dob)
    return OkResponse()
