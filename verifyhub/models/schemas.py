"""
VerifyHub API -- Pydantic Data Models

Request and response bodies for every endpoint. The wire format uses
camelCase (sessionId, refCode, updatedAt ...) because that's what the demo
page and the admin dashboard send and expect; the Python attributes are
snake_case and the aliases do the translation. FastAPI serializes
response_model output by alias, so handlers can return either form.

The Field() descriptions and examples show up in the Swagger UI at /docs.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class WireModel(BaseModel):
    """Accepts both camelCase (wire) and snake_case (Python) field names."""

    model_config = ConfigDict(populate_by_name=True)


SessionStatus = Literal["pending", "passed", "failed"]


def _scalar_to_text(value):
    """Numbers and booleans sent where text is expected are kept as their JSON text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


# Objects and arrays are still rejected
LenientText = Annotated[str | None, BeforeValidator(_scalar_to_text)]


# ---------------------------------------------------------------------------
# POST /api/create-session
# ---------------------------------------------------------------------------

class CreateSessionRequest(WireModel):
    person_id: LenientText = Field(
        default=None,
        alias="personId",
        description="Who is being verified. Stored as vendorData. Defaults to 'discord_user'.",
        examples=["discord_123456789"],
    )


class CreateSessionResponse(WireModel):
    """Where to send the user, and how to find their result afterwards."""

    session_id: str = Field(alias="sessionId", examples=["demo_1760000000000_9f86d081884c7d659a2f"])
    url: str = Field(
        description="Provider (or demo page) URL the user should open to complete verification.",
    )
    mode: Literal["demo", "veriff"] = Field(examples=["demo"])
    ref_code: str = Field(alias="refCode", examples=["VHC-3FA9C1"])


# ---------------------------------------------------------------------------
# POST /api/provider/demo-submit
# ---------------------------------------------------------------------------

class DemoSubmitRequest(WireModel):
    """What the demo completion page posts. Only these three fields are kept."""

    session_id: str | None = Field(default=None, alias="sessionId")
    decision: str | None = Field(
        default=None,
        description="'approved' passes; anything else is recorded as 'rejected'.",
        examples=["approved"],
    )
    dob: str | None = Field(default=None, description="Date of birth, YYYY-MM-DD.", examples=["2000-06-15"])


class OkResponse(BaseModel):
    ok: bool = True


# ---------------------------------------------------------------------------
# GET /api/result/{sessionId}
# ---------------------------------------------------------------------------

class PublicResult(WireModel):
    """The limited view of a session anyone holding its id may read."""

    status: SessionStatus = Field(examples=["passed"])
    decision: str = Field(
        description="Raw provider decision, or 'pending' / 'unknown'.",
        examples=["approved"],
    )
    age: int | None = Field(default=None, examples=[24])
    dob: str | None = Field(default=None, examples=["2000-06-15"])
    updated_at: str = Field(alias="updatedAt", examples=["2026-02-07T10:30:00.000+00:00"])
    ref_code: str | None = Field(default=None, alias="refCode", examples=["VHC-3FA9C1"])


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class AdminLoginRequest(BaseModel):
    email: LenientText = Field(default=None, examples=["admin@example.com"])
    password: LenientText = None


class AdminLoginResponse(BaseModel):
    ok: bool = True
    token: str = Field(description="Same value as the admin_token cookie, for Bearer use.")


class AdminMe(BaseModel):
    email: str


class AdminResultItem(PublicResult):
    """Full record, including the requester correlation data."""

    session_id: str = Field(alias="sessionId")
    vendor_data: str | None = Field(default=None, alias="vendorData", examples=["discord_123456789"])


class AdminResults(BaseModel):
    count: int
    items: list[AdminResultItem]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    error: str = Field(description="Short human-readable message.", examples=["Unauthorized"])
    code: str = Field(description="Machine-readable reason.", examples=["unauthorized"])
