"""Response objects for translated operations."""

from __future__ import annotations

import copy
from typing import Any, Mapping

from oas_tools.errors import FieldValidationError
from oas_tools.fields import DEFAULT_MAX_DEPTH, Field

SUCCESS_DESCRIPTION = "success"
VALIDATION_ERROR_DESCRIPTION = "Validation error"
DEFAULT_DESCRIPTION = "Some error may have occurred"
VALIDATION_ERROR_STATUS = 403


def validation_errors(
    request_body: Field | None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[str]:
    """Return the violations reported when an empty object is sent as *request_body*."""
    if request_body is None:
        return []
    try:
        request_body.validate({}, strict=True, abort_early=False, max_depth=max_depth)
    except FieldValidationError as err:
        return list(err.errors)
    return []


def assemble_responses(
    request_body: Field | None = None,
    overrides: Mapping[Any, Any] | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> dict[str, Any]:
    """Build the responses object of an operation.

    The baseline holds ``200``, ``403`` and ``default`` entries. Each entry in
    *overrides* replaces the baseline entry with the same status code.
    Status codes are stored as strings. A request body nested deeper than
    *max_depth* raises :class:`~oas_tools.errors.MaxDepthExceeded`.
    """
    errors = validation_errors(request_body, max_depth=max_depth)
    responses: dict[str, Any] = {
        "200": {"description": SUCCESS_DESCRIPTION},
        str(VALIDATION_ERROR_STATUS): _validation_error_response(errors),
        "default": {"description": DEFAULT_DESCRIPTION},
    }
    for status_code, definition in (overrides or {}).items():
        responses[str(status_code)] = copy.deepcopy(definition)
    return responses


def create_response_object(
    description: str,
    status_code: int,
    body_properties: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a JSON response definition carrying ``statusCode`` and an optional ``body``."""
    properties: dict[str, Any] = {
        "statusCode": {"type": "number", "example": status_code},
    }
    if body_properties:
        properties["body"] = {
            "type": "object",
            "properties": copy.deepcopy(dict(body_properties)),
        }
    return {
        "description": description,
        "content": {
            "application/json": {
                "schema": {"type": "object", "properties": properties},
            }
        },
    }


def _validation_error_response(errors: list[str]) -> dict[str, Any]:
    return {
        "description": VALIDATION_ERROR_DESCRIPTION,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "code": {"type": "number", "example": VALIDATION_ERROR_STATUS},
                        "message": {"type": "string", "example": "error"},
                        "errors": {
                            "type": "array",
                            "items": {"type": "string"},
                            "example": errors,
                        },
                    },
                }
            }
        },
    }
