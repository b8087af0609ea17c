"""
World API Backend — Auth Route Handlers
=======================================

What:  POST /signup, POST /login and GET /me.
How:   Routes bind the credentials and hand them to AuthService; the service
       raises the 4xx/5xx exceptions that the global handlers format.

Response bodies:
    /signup   201 empty
    /login    200 empty, Set-Cookie with the session id
    /me       200 {"username": ...}, or 401 "please login" without a session
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from worldapi.binding import bind_body
from worldapi.dependencies import (
    AuthenticatedUser,
    get_auth_service,
    get_session_gate,
    require_auth,
)
from worldapi.schemas.auth import Credentials, MeResponse
from worldapi.services.auth_service import AuthService
from worldapi.services.session_gate import SessionGate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/signup",
    status_code=201,
    response_class=Response,
    responses={
        400: {"description": "Malformed body, or empty username/password"},
        409: {"description": "Username is already used"},
    },
    summary="Create an account",
)
async def signup(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> Response:
    credentials = await bind_body(request, Credentials, json_error=True)
    await service.signup(credentials)
    return Response(status_code=201)


@router.post(
    "/login",
    response_class=Response,
    responses={
        400: {"description": "Malformed body, or empty username/password"},
        401: {"description": "Unknown user or wrong password"},
    },
    summary="Log in and receive a session cookie",
)
async def login(
    request: Request,
    service: AuthService = Depends(get_auth_service),
    gate: SessionGate = Depends(get_session_gate),
) -> Response:
    credentials = await bind_body(request, Credentials)
    response = Response(status_code=200)
    await service.login(credentials, gate=gate, request=request, response=response)
    return response


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"description": "please login"}},
    summary="Name of the logged-in user",
)
async def me(user: AuthenticatedUser = Depends(require_auth)) -> MeResponse:
    return MeResponse(username=user.username)
