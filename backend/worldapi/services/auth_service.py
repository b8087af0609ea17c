"""
World API Backend — Auth Service
================================

What:  Signup and login decision logic.
How:   Validates credentials, runs the existence check, hashes or verifies the
       password and, on login, writes the username into the caller's session.
Who:   Called by routes/auth.py with a WorldStore and a SessionGate built for
       the current request.

Signup Flow:
    empty field?            → ValidationError 400 "Username or Password is empty"
    username taken?         → ConflictError 409 "Username is already used"
    hash + insert + commit  → 201 (commit failure → DatabaseError 500)

Login Flow:
    empty field?            → ValidationError 400
    user lookup             → NotFound becomes AuthenticationError 401 (no body)
    bcrypt check            → mismatch becomes AuthenticationError 401 (no body)
    session write + commit  → SessionError 500 on store failure
"""

import logging

from starlette.requests import Request
from starlette.responses import Response

from worldapi.config import Settings
from worldapi.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from worldapi.schemas.auth import Credentials
from worldapi.services.password import hash_password, verify_password
from worldapi.services.session_gate import SessionGate
from worldapi.services.world_store import WorldStore

logger = logging.getLogger(__name__)

EMPTY_CREDENTIALS = "Username or Password is empty"


def _require_credentials(credentials: Credentials) -> None:
    if credentials.username == "" or credentials.password == "":
        raise ValidationError(message=EMPTY_CREDENTIALS)


class AuthService:
    """
    Business logic for account creation and login.

    The existence check and the insert are two separate statements. Two
    concurrent signups for one name can both pass the check; the second
    insert then fails on the `users` primary key and is reported as 409.
    """

    def __init__(self, store: WorldStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def signup(self, credentials: Credentials) -> None:
        _require_credentials(credentials)

        if await self.store.count_users_by_username(credentials.username) > 0:
            logger.info("Signup rejected, username taken: %s", credentials.username)
            raise ConflictError(context={"username": credentials.username})

        hashed = hash_password(credentials.password, rounds=self.settings.bcrypt_rounds)
        await self.store.insert_user(credentials.username, hashed)
        await self.store.commit("signup")
        logger.info("User created: %s", credentials.username)

    async def login(
        self,
        credentials: Credentials,
        gate: SessionGate,
        request: Request,
        response: Response,
    ) -> None:
        """
        Authenticate and bind the session cookie to `response`.

        Unknown users and wrong passwords raise the same bodiless 401.
        """
        _require_credentials(credentials)

        try:
            user = await self.store.find_user_by_username(credentials.username)
        except NotFoundError as e:
            raise AuthenticationError(
                message="Login for unknown user",
                context={"username": credentials.username},
            ) from e

        if not verify_password(user.hashed_password, credentials.password):
            raise AuthenticationError(
                message="Login with wrong password",
                context={"username": credentials.username},
            )

        handle = await gate.get(request)
        handle.user_name = credentials.username
        await handle.save(response)
        logger.info("User logged in: %s", credentials.username)
