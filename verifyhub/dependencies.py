"""FastAPI dependencies that hand the per-app objects to route handlers."""

from fastapi import Request

from verifyhub.auth import AdminGate
from verifyhub.sessions import SessionManager
from verifyhub.store import SessionStore


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_admin_gate(request: Request) -> AdminGate:
    return request.app.state.admin_gate
