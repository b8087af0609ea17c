"""
FastAPI dependencies: settings, store and session wiring, and the auth gate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from worldapi.config import Settings
from worldapi.database import get_db_session
from worldapi.exceptions import AuthenticationError
from worldapi.services.auth_service import AuthService
from worldapi.services.session_gate import SessionGate
from worldapi.services.world_service import WorldService
from worldapi.services.world_store import WorldStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity established by require_auth for the current request."""

    username: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_world_store(db: AsyncSession = Depends(get_db_session)) -> WorldStore:
    return WorldStore(db)


def get_session_gate(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> SessionGate:
    return SessionGate(db, settings)


def get_auth_service(
    store: WorldStore = Depends(get_world_store),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(store, settings)


def get_world_service(
    store: WorldStore = Depends(get_world_store),
    settings: Settings = Depends(get_settings),
) -> WorldService:
    return WorldService(store, settings)


async def require_auth(
    request: Request,
    gate: SessionGate = Depends(get_session_gate),
) -> AuthenticatedUser:
    """
    Reject the request with 401 "please login" unless the session names a user.

    Session store failures surface as SessionError (500).
    """
    handle = await gate.get(request)
    if not handle.user_name:
        raise AuthenticationError(message="No authenticated session", body="please login")
    return AuthenticatedUser(username=handle.user_name)
