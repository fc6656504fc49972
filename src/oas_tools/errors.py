"""Exceptions raised while translating field schemas."""

from __future__ import annotations

import json
from typing import Any, Sequence


class OasToolsError(ValueError):
    """Base class for all oas-tools errors."""


class UnsupportedFieldType(OasToolsError):
    """Raised when a field kind has no translation rule."""

    def __init__(self, kind: Any) -> None:
        self.kind = getattr(kind, "value", kind)
        super().__init__(f"unsupported field type '{self.kind}'")


class InvalidSchemaShape(OasToolsError):
    """Raised when an object field is required but another kind was given."""

    def __init__(self, where: str, kind: Any) -> None:
        self.where = where
        self.kind = getattr(kind, "value", kind)
        super().__init__(f"{where} must be an object field, got '{self.kind}'")


class MissingMetadata(OasToolsError):
    """Raised when a root schema carries no metadata."""

    def __init__(self) -> None:
        super().__init__("metadata for schema is missing")


class MissingRequiredMetadataField(OasToolsError):
    """Raised when ``path`` or ``method`` is absent from root metadata."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"metadata for schema is missing '{field}' (required: path, method)"
        )


class InvalidMetadata(OasToolsError):
    """Raised when a metadata entry has an unusable value."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"metadata field '{field}' has invalid value {value!r}")


class InvalidExample(OasToolsError):
    """Raised when a declared example fails its own field's validation."""

    def __init__(self, field_name: str, violations: Sequence[str]) -> None:
        self.field_name = field_name
        self.violations = list(violations)
        super().__init__(
            f"example for field '{field_name}' is invalid: {json.dumps(self.violations)}"
        )


class MaxDepthExceeded(OasToolsError):
    """Raised when a field tree is nested deeper than the translation limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"field tree exceeds maximum depth of {limit} (cyclic schema?)"
        )


class FieldValidationError(OasToolsError):
    """Raised by :meth:`Field.validate` with the ordered violation messages."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(f"{count} validation {noun}: {'; '.join(self.errors)}")


class ConfigError(OasToolsError):
    """Raised for unusable configuration or source references."""
