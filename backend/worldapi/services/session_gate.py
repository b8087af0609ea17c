"""
World API Backend — Session Gate
================================

What:  Server-side sessions keyed by a signed cookie.
How:   The cookie (default name `sessions`) carries a random session id
       signed with itsdangerous. The payload lives in the `sessions` table as
       JSON of `SessionPayload`, a typed model with a single optional
       `userName` field.
Who:   Login writes the session; dependencies.require_auth reads it.

Lifecycle:
    get(request)        → SessionHandle (loaded, or fresh when the cookie is
                          missing, forged, expired or points at no row)
    handle.user_name    → typed read/write of the stored username
    handle.save(resp)   → upsert and commit the row, refresh expiry,
                          set the cookie

Store failures raise SessionError (500). A bad cookie is not a failure: the
caller simply gets an unauthenticated session.
"""

import logging
import secrets
import time
from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import Response

from worldapi.config import Settings
from worldapi.exceptions import SessionError
from worldapi.models.session import SessionRecord

logger = logging.getLogger(__name__)

SESSION_SALT = "worldapi.session"


class SessionPayload(BaseModel):
    """Everything a session can hold."""

    model_config = ConfigDict(populate_by_name=True)

    user_name: Optional[str] = Field(default=None, alias="userName")


class SessionHandle:
    """One client's session for the duration of a request."""

    def __init__(self, gate: "SessionGate", session_id: str, payload: SessionPayload, is_new: bool):
        self._gate = gate
        self.session_id = session_id
        self.payload = payload
        self.is_new = is_new

    @property
    def user_name(self) -> Optional[str]:
        return self.payload.user_name

    @user_name.setter
    def user_name(self, value: Optional[str]) -> None:
        self.payload.user_name = value

    async def save(self, response: Response) -> None:
        await self._gate.save(self, response)


class SessionGate:
    """
    Loads and persists sessions through the request's database session.

    Only the row named by the caller's own cookie is ever read or written.
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self._serializer = URLSafeTimedSerializer(settings.session_secret, salt=SESSION_SALT)

    def _new_handle(self) -> SessionHandle:
        return SessionHandle(self, secrets.token_urlsafe(32), SessionPayload(), is_new=True)

    def _session_id_from_cookie(self, request: Request) -> Optional[str]:
        raw = request.cookies.get(self.settings.session_cookie_name)
        if not raw:
            return None
        try:
            session_id = self._serializer.loads(raw, max_age=self.settings.session_max_age)
        except BadSignature:
            # Covers SignatureExpired as well
            logger.info("Ignoring invalid or expired session cookie")
            return None
        return session_id if isinstance(session_id, str) else None

    async def get(self, request: Request) -> SessionHandle:
        session_id = self._session_id_from_cookie(request)
        if session_id is None:
            return self._new_handle()

        try:
            record = await self.db.get(SessionRecord, session_id)
        except SQLAlchemyError as e:
            logger.error("Failed to load session: %s", e)
            raise SessionError(
                message="Failed to load session",
                context={"error_type": type(e).__name__},
            ) from e

        if record is None or record.expires_at <= int(time.time()):
            return self._new_handle()

        try:
            payload = SessionPayload.model_validate_json(record.payload)
        except PydanticValidationError:
            logger.warning("Discarding unreadable session payload")
            payload = SessionPayload()
        return SessionHandle(self, session_id, payload, is_new=False)

    async def save(self, handle: SessionHandle, response: Response) -> None:
        expires_at = int(time.time()) + self.settings.session_max_age
        record = SessionRecord(
            id=handle.session_id,
            payload=handle.payload.model_dump_json(by_alias=True, exclude_none=True),
            expires_at=expires_at,
        )
        try:
            await self.db.merge(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to save session: %s", e)
            raise SessionError(
                message="Failed to save session",
                context={"error_type": type(e).__name__},
            ) from e

        handle.is_new = False
        response.set_cookie(
            key=self.settings.session_cookie_name,
            value=self._serializer.dumps(handle.session_id),
            max_age=self.settings.session_max_age,
            path="/",
            httponly=True,
            secure=self.settings.session_cookie_secure,
            samesite="lax",
        )
