"""
World API Backend — Request ID Middleware
=========================================

What:  Assigns an ID to each request and returns it in the X-Request-ID header.
How:   A client-supplied X-Request-ID is reused only when it is a short token
       of letters, digits, '.', '_' or '-'. Anything else (too long, spaces,
       newlines) is replaced by a generated 8-character ID, so a caller cannot
       forge extra log lines through the header. The ID lives in a ContextVar
       that log lines and exception handlers read.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accepted_request_id(supplied: Optional[str]) -> Optional[str]:
    """Return the client's ID if it is safe to log verbatim, else None."""
    if supplied and _VALID_REQUEST_ID.fullmatch(supplied):
        return supplied
    return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accepted_request_id(request.headers.get(REQUEST_ID_HEADER)) or new_request_id()
        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
