"""
World API Backend — Request Body Binding
========================================

What:  Turns a raw request body into a Pydantic model, accepting either JSON
       or form fields.
How:   The Content-Type header selects the decoder:

       (empty body)                         → every field keeps its default
       application/json                     → JSON object, strict types
       application/x-www-form-urlencoded    → form fields, coerced from text
       multipart/form-data                  → same as above (files ignored)
       anything else                        → ValidationError

       Unknown keys are ignored. A JSON null field leaves the default in
       place, and so does an empty form field.
Who:   POST /cities, POST /signup and POST /login.

Any decode or type failure raises ValidationError with the body the caller
asked for, so each route keeps its own 400 wording.
"""

import json
import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from worldapi.exceptions import ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

BAD_REQUEST_BODY = "bad request body"

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def _read_fields(request: Request) -> tuple:
    """Return (fields, strict) for the request body."""
    media_type = _media_type(request)

    if media_type in FORM_TYPES:
        form = await request.form()
        fields: Dict[str, Any] = {}
        for key in form.keys():
            values = [v for v in form.getlist(key) if isinstance(v, str)]
            if values and values[0] != "":
                fields[key] = values[0]
        return fields, False

    raw = await request.body()
    if not raw.strip():
        return {}, True

    if media_type != "application/json":
        raise ValueError(f"unsupported media type {media_type or '(none)'}")

    data = json.loads(raw)
    if data is None:
        return {}, True
    if not isinstance(data, dict):
        raise ValueError("JSON body is not an object")
    return {k: v for k, v in data.items() if v is not None}, True


async def bind_body(
    request: Request,
    model: Type[M],
    error_body: str = BAD_REQUEST_BODY,
    json_error: bool = False,
) -> M:
    """
    Bind the request body to `model`.

    Args:
        request:     Incoming request
        model:       Pydantic model whose fields all have defaults
        error_body:  Client-facing 400 body on failure
        json_error:  Send the 400 body as {"message": ...}

    Raises:
        ValidationError: Body could not be decoded or did not fit the model
    """
    try:
        fields, strict = await _read_fields(request)
        return model.model_validate(fields, strict=strict)
    except (ValueError, PydanticValidationError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors too
        logger.info("Rejected request body for %s: %s", model.__name__, e)
        raise ValidationError(
            message=f"Could not bind body to {model.__name__}",
            body=error_body,
            json_body=json_error,
            context={"error_type": type(e).__name__},
        ) from e
