"""
VerifyHub -- Application entry point.

Run with:
    uvicorn verifyhub.main:app --reload

Then open http://localhost:8000/docs for the interactive Swagger UI.

This file:
  1. Builds the per-process objects (settings, session store, provider
     client, admin gate) and hangs them on app.state
  2. Adds CORS middleware and security headers
  3. Maps the error taxonomy onto JSON error responses
  4. Mounts the route modules (sessions, provider, results, admin)
  5. Serves the demo completion page and the health check
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from verifyhub.auth import AdminGate
from verifyhub.config import Settings
from verifyhub.errors import InternalError, ServiceError
from verifyhub.provider import ProviderClient
from verifyhub.routes import admin, provider, results, sessions
from verifyhub.sessions import SessionManager
from verifyhub.store import SessionStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Static pages live next to the package, not inside it
PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "X-XSS-Protection": "0",
}


def create_app(
    settings: Settings | None = None,
    store: SessionStore | None = None,
    provider_client: ProviderClient | None = None,
    session_manager: SessionManager | None = None,
    admin_gate: AdminGate | None = None,
) -> FastAPI:
    """Build the application. Anything not passed in is created from settings."""
    settings = settings or Settings.from_env()
    store = store if store is not None else SessionStore()

    if provider_client is None and settings.provider_mode == "veriff":
        provider_client = ProviderClient(
            base_url=settings.provider_base_url,
            api_key=settings.provider_api_key,
            timeout=settings.provider_timeout,
        )

    app = FastAPI(
        title="VerifyHub",
        version=VERSION,
        description=(
            "Identity-verification session broker. Creates verification sessions "
            "with an external provider (or a local demo page), records the decision "
            "callbacks, and exposes the results to the user and to an admin dashboard.\n\n"
            "| Endpoint | Purpose |\n"
            "|----------|--------|\n"
            "| `POST /api/create-session` | Start a verification |\n"
            "| `POST /api/provider/webhook` | Provider decision callback |\n"
            "| `POST /api/provider/demo-submit` | Demo page decision |\n"
            "| `GET /api/result/{id}` | Public result for one session |\n"
            "| `POST /api/admin/login` | Admin login |\n"
            "| `GET /api/admin/results` | All sessions (admin) |\n"
        ),
    )

    app.state.settings = settings
    app.state.store = store
    app.state.sessions = session_manager or SessionManager(store, settings, provider_client)
    app.state.admin_gate = admin_gate or AdminGate(settings)

    # -----------------------------------------------------------------------
    # CORS -- the demo page and dashboard may be served from anywhere
    # -----------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Security headers on every response. No CSP: the demo page runs an
    # inline script.
    # -----------------------------------------------------------------------

    @app.middleware("http")
    async def secure_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # -----------------------------------------------------------------------
    # Error responses: {"error": <message>, "code": <reason>}
    # -----------------------------------------------------------------------

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "code": "validation_error"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = InternalError()
        return JSONResponse(
            status_code=error.status_code,
            content={"error": error.message, "code": error.code},
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------

    app.include_router(sessions.router)
    app.include_router(provider.router)
    app.include_router(results.router)
    app.include_router(admin.router)

    @app.get("/provider-demo.html", include_in_schema=False)
    async def provider_demo_page():
        """Serve the simulated provider page used in demo mode."""
        return FileResponse(PUBLIC_DIR / "provider-demo.html")

    @app.get(
        "/api/health",
        summary="Health check",
        description="Returns the current status of the API. Use this for uptime monitoring.",
        tags=["System"],
    )
    async def health():
        return {
            "status": "healthy",
            "mode": settings.provider_mode,
            "version": VERSION,
            "sessions_stored": len(store),
        }

    logger.info("Mode: %s | Public: %s", settings.provider_mode, settings.public_base_url)
    return app


app = create_app()
