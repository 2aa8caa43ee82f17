"""
Request body parsing for JSON and HTML form submissions
"""

import json
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

Model = TypeVar("Model", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_payload(request: Request) -> Optional[Dict[str, Any]]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "Malformed JSON body", "input": {}}]
        ) from e


def form_or_json(model: Type[Model], required: bool = True) -> Callable:
    """
    Dependency that validates ``model`` from a JSON or form-encoded body

    Args:
        model: Pydantic request model
        required: When False an empty body resolves to None

    Usage:
        async def login(request: LoginRequest = Depends(form_or_json(LoginRequest))):
            ...
    """

    async def parse(request: Request) -> Optional[Model]:
        payload = await _read_payload(request)
        if payload is None:
            if not required:
                return None
            payload = {}

        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            errors = [
                {**error, "loc": ("body", *error["loc"])}
                for error in e.errors(include_url=False, include_context=False)
            ]
            raise RequestValidationError(errors) from e

    return parse
