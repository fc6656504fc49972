"""Translation of validation fields into OpenAPI schema objects."""

from __future__ import annotations

import copy
import logging
from typing import Any

from oas_tools.errors import (
    FieldValidationError,
    InvalidExample,
    MaxDepthExceeded,
    UnsupportedFieldType,
)
from oas_tools.fields import (
    DEFAULT_MAX_DEPTH,
    AnyField,
    ArrayField,
    BooleanField,
    DateField,
    Field,
    NumberField,
    ObjectField,
    StringField,
)

logger = logging.getLogger(__name__)

ANONYMOUS_FIELD = "<anonymous_field>"


def schema_object(
    field: AnyField,
    name: str | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> dict[str, Any]:
    """Translate *field* into an OpenAPI schema object.

    Parameters
    ----------
    field:
        Root of the field tree to translate.
    name:
        Field name, only used in error messages.
    max_depth:
        Maximum nesting depth before :class:`MaxDepthExceeded` is raised.
    """
    return _translate(field, name, depth=0, max_depth=max_depth)


def verify_example(
    field: Field,
    example: Any,
    name: str | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Validate *example* against the rules of *field*.

    Raises :class:`InvalidExample` naming the field and listing the violations,
    or :class:`MaxDepthExceeded` when *field* nests deeper than *max_depth*.
    """
    label = name or ANONYMOUS_FIELD
    logger.debug("validating example for %s: %r", label, example)
    try:
        field.validate(example, strict=True, max_depth=max_depth)
    except FieldValidationError as err:
        violations = [_name_violation(message, label) for message in err.errors]
        raise InvalidExample(label, violations) from err


def _translate(field: Any, name: str | None, *, depth: int, max_depth: int) -> dict[str, Any]:
    if depth > max_depth:
        raise MaxDepthExceeded(max_depth)

    if isinstance(field, StringField):
        schema = _string_schema(field)
    elif isinstance(field, BooleanField):
        schema = {"type": "boolean"}
    elif isinstance(field, DateField):
        # dates travel as formatted strings
        schema = {"type": "string", "format": "date-time"}
    elif isinstance(field, NumberField):
        schema = {"type": "number"}
    elif isinstance(field, ArrayField):
        schema = _array_schema(field, depth=depth, max_depth=max_depth)
    elif isinstance(field, ObjectField):
        schema = _object_schema(field, depth=depth, max_depth=max_depth)
    else:
        raise UnsupportedFieldType(getattr(field, "kind", type(field).__name__))

    metadata = field.metadata or {}
    example = metadata.get("example")
    if example is not None:
        verify_example(field, example, name, max_depth=max_depth)
        schema["example"] = copy.deepcopy(example)
    return schema


def _string_schema(field: StringField) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string"}
    fmt = (field.metadata or {}).get("format")
    if fmt is not None:
        schema["format"] = fmt
    return schema


def _array_schema(field: ArrayField, *, depth: int, max_depth: int) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "array"}
    if field.whitelist:
        schema["items"] = [
            _translate(entry, None, depth=depth + 1, max_depth=max_depth)
            if isinstance(entry, Field)
            else copy.deepcopy(entry)
            for entry in field.whitelist
        ]
    elif field.inner_type is not None:
        schema["items"] = _translate(field.inner_type, None, depth=depth + 1, max_depth=max_depth)
    return schema


def _object_schema(field: ObjectField, *, depth: int, max_depth: int) -> dict[str, Any]:
    required: list[str] = []
    properties: dict[str, Any] = {}
    for child_name, child in field.fields.items():
        properties[child_name] = _translate(
            child, child_name, depth=depth + 1, max_depth=max_depth
        )
        if child.is_required:
            required.append(child_name)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _name_violation(message: str, label: str) -> str:
    if message.startswith("this"):
        return f"{label}{message[len('this'):]}"
    return message
