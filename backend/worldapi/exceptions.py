"""
World API Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions, one per HTTP outcome the API produces.
How:   Each exception carries a log message, an optional context dict and the
       exact body the client receives (often none at all). Global exception
       handlers in main.py turn them into responses.
Who:   Raised by the store, the services and the auth dependency.

Exception Hierarchy:
    WorldApiError (base)
    ├── ValidationError       → 400 Bad Request
    ├── AuthenticationError   → 401 Unauthorized
    ├── NotFoundError         → 404 Not Found (empty body)
    ├── ConflictError         → 409 Conflict
    ├── DatabaseError         → 500 Internal Server Error (empty body)
    ├── PasswordHashError     → 500 Internal Server Error (empty body)
    └── SessionError          → 500 Internal Server Error

`message` and `context` are for logs only. `body` is what the client sees;
`None` means an empty response body. `json_body` wraps the body as
`{"message": body}` instead of sending plain text.
"""

from typing import Any, Dict, Optional


class WorldApiError(Exception):
    """
    Base exception for all World API errors.

    Attributes:
        message:    Log-facing description
        context:    Additional debug info (logged, never returned)
        body:       Client-facing response body, or None for an empty body
        json_body:  Send body as {"message": body} instead of text/plain
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        body: Optional[str] = None,
        json_body: bool = False,
    ):
        self.message = message
        self.context = context or {}
        self.body = body
        self.json_body = json_body
        super().__init__(self.message)


class ValidationError(WorldApiError):
    """
    Raised when the client sent a body that cannot be bound or is missing
    required values.

    HTTP: 400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        body: Optional[str] = None,
        json_body: bool = False,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(
            message=message,
            context=ctx,
            body=message if body is None else body,
            json_body=json_body,
        )
        self.field = field


class AuthenticationError(WorldApiError):
    """
    Raised for bad credentials or a missing session.

    Login failures send no body so that an unknown user and a wrong password
    look identical to the client.

    HTTP: 401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        body: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context, body=body)


class NotFoundError(WorldApiError):
    """
    Raised when a lookup matched zero rows.

    HTTP: 404 Not Found, empty body
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(WorldApiError):
    """
    Raised when a signup targets a username that already exists.

    HTTP: 409 Conflict
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Username is already used",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context, body=message)


class DatabaseError(WorldApiError):
    """
    Raised when a store operation fails for any reason other than zero rows.

    The client always gets an empty 500; the original exception type and the
    operation name are kept in `context` for the log line.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PasswordHashError(WorldApiError):
    """
    Raised when hashing fails or a stored hash is malformed.

    A plain password mismatch is not an error; see services.password.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Password hashing failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SessionError(WorldApiError):
    """
    Raised when the session store cannot load or persist a session.

    HTTP: 500 with a short plain-text explanation
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Session store failure",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            context=context,
            body="something wrong in getting session",
        )
