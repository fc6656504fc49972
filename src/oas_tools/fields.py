"""Validation field nodes.

A field tree describes the shape, requiredness and constraints of request
data.  Trees are built with the module-level constructors and the chained
builder methods, e.g.::

    obj({"name": string().required(), "age": number().integer().min(0)})

Every builder method returns a new node; nodes are never mutated in place.
Validation is delegated to a :mod:`jsonschema` Draft 2020-12 validator built
from the node, extended with a ``date`` type for :mod:`datetime` values.
"""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, field as dataclass_field, replace
from typing import Any, ClassVar, Iterable, Mapping, TypeVar, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from jsonschema.validators import extend

from oas_tools.errors import FieldValidationError, MaxDepthExceeded, UnsupportedFieldType


class FieldKind(str, enum.Enum):
    """Closed set of field kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"


class Presence(str, enum.Enum):
    """Whether a value must be present."""

    REQUIRED = "required"
    OPTIONAL = "optional"


def _is_date(_checker: Any, instance: Any) -> bool:
    return isinstance(instance, dt.date)


FieldValidator = extend(
    Draft202012Validator,
    type_checker=Draft202012Validator.TYPE_CHECKER.redefine("date", _is_date),
)

DEFAULT_MAX_DEPTH = 64

_TRUE_STRINGS = {"true", "1"}
_FALSE_STRINGS = {"false", "0"}


FieldT = TypeVar("FieldT", bound="Field")


@dataclass
class Field:
    """Base class of all field nodes."""

    kind: ClassVar[FieldKind]

    presence: Presence = Presence.OPTIONAL
    metadata: Mapping[str, Any] | None = None

    def required(self: FieldT) -> FieldT:
        """Return a copy that rejects missing values."""
        return replace(self, presence=Presence.REQUIRED)

    def optional(self: FieldT) -> FieldT:
        """Return a copy that accepts missing values."""
        return replace(self, presence=Presence.OPTIONAL)

    def meta(self: FieldT, values: Mapping[str, Any] | None = None, **extra: Any) -> FieldT:
        """Return a copy with *values* merged into the metadata."""
        merged = dict(self.metadata or {})
        merged.update(values or {})
        merged.update(extra)
        return replace(self, metadata=merged)

    @property
    def is_required(self) -> bool:
        """Whether the presence is required."""
        return self.presence is Presence.REQUIRED

    def to_json_schema(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> dict[str, Any]:
        """Return the JSON schema used to validate a present value.

        Raises :class:`~oas_tools.errors.MaxDepthExceeded` when the field tree
        is nested deeper than *max_depth*.
        """
        return self._json_schema(depth=0, max_depth=max_depth)

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        raise UnsupportedFieldType(getattr(self, "kind", type(self).__name__))

    def _check_depth(self, depth: int, max_depth: int) -> None:
        if depth > max_depth:
            raise MaxDepthExceeded(max_depth)

    def cast(self, value: Any) -> Any:
        """Coerce *value* towards this field's type; never raises."""
        return value

    def validate(
        self,
        value: Any,
        *,
        strict: bool = True,
        abort_early: bool = True,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> Any:
        """Validate *value* against this field's rules.

        Parameters
        ----------
        value:
            Candidate value. ``None`` stands for a missing value.
        strict:
            When false, the value is cast with :meth:`cast` before validation.
        abort_early:
            Stop at the first violation instead of collecting all of them.
        max_depth:
            Nesting limit of the field tree, see :meth:`to_json_schema`.

        Returns the validated (possibly cast) value or raises
        :class:`~oas_tools.errors.FieldValidationError`.
        """
        if not strict:
            value = self.cast(value)
        errors = self.errors(value, abort_early=abort_early, max_depth=max_depth)
        if errors:
            raise FieldValidationError(errors)
        return value

    def errors(
        self,
        value: Any,
        *,
        abort_early: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> list[str]:
        """Return the ordered violation messages for *value*."""
        if value is None:
            if self.is_required:
                return ["this is a required field"]
            return []
        validator = FieldValidator(self.to_json_schema(max_depth=max_depth))
        messages: list[str] = []
        for error in validator.iter_errors(value):
            messages.append(_format_error(error))
            if abort_early:
                break
        return messages


@dataclass
class StringField(Field):
    kind: ClassVar[FieldKind] = FieldKind.STRING

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    def min(self, length: int) -> StringField:
        """Return a copy requiring at least *length* characters."""
        return replace(self, min_length=length)

    def max(self, length: int) -> StringField:
        """Return a copy allowing at most *length* characters."""
        return replace(self, max_length=length)

    def matches(self, pattern: str) -> StringField:
        """Return a copy whose values must match the regular expression *pattern*."""
        return replace(self, pattern=pattern)

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        self._check_depth(depth, max_depth)
        schema: dict[str, Any] = {"type": "string"}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.pattern is not None:
            schema["pattern"] = self.pattern
        return schema

    def cast(self, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


@dataclass
class NumberField(Field):
    kind: ClassVar[FieldKind] = FieldKind.NUMBER

    minimum: float | None = None
    maximum: float | None = None
    integral: bool = False

    def min(self, value: float) -> NumberField:
        """Return a copy rejecting values below *value*."""
        return replace(self, minimum=value)

    def max(self, value: float) -> NumberField:
        """Return a copy rejecting values above *value*."""
        return replace(self, maximum=value)

    def integer(self) -> NumberField:
        """Return a copy that only accepts whole numbers."""
        return replace(self, integral=True)

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        self._check_depth(depth, max_depth)
        schema: dict[str, Any] = {"type": "integer" if self.integral else "number"}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema

    def cast(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        for convert in (int, float):
            try:
                return convert(text)
            except ValueError:
                continue
        return value


@dataclass
class BooleanField(Field):
    kind: ClassVar[FieldKind] = FieldKind.BOOLEAN

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        self._check_depth(depth, max_depth)
        return {"type": "boolean"}

    def cast(self, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
            return bool(value)
        return value


@dataclass
class DateField(Field):
    kind: ClassVar[FieldKind] = FieldKind.DATE

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        self._check_depth(depth, max_depth)
        return {"type": "date"}

    def cast(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        try:
            return dt.datetime.fromisoformat(text)
        except ValueError:
            return value


@dataclass
class ArrayField(Field):
    """Array of values.

    ``whitelist`` holds explicit alternatives for the elements (fields or
    literal values) and takes precedence over ``inner_type`` when non-empty.
    """

    kind: ClassVar[FieldKind] = FieldKind.ARRAY

    inner_type: Field | None = None
    whitelist: tuple[Any, ...] = ()
    min_items: int | None = None
    max_items: int | None = None

    def of(self, inner: Field) -> ArrayField:
        """Return a copy whose elements follow *inner*."""
        return replace(self, inner_type=inner)

    def one_of(self, alternatives: Iterable[Any]) -> ArrayField:
        """Return a copy whose elements must match one of *alternatives*."""
        return replace(self, whitelist=tuple(alternatives))

    def min(self, count: int) -> ArrayField:
        """Return a copy requiring at least *count* elements."""
        return replace(self, min_items=count)

    def max(self, count: int) -> ArrayField:
        """Return a copy allowing at most *count* elements."""
        return replace(self, max_items=count)

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        self._check_depth(depth, max_depth)
        schema: dict[str, Any] = {"type": "array"}
        if self.whitelist:
            schema["items"] = {
                "anyOf": [
                    entry._json_schema(depth=depth + 1, max_depth=max_depth)
                    if isinstance(entry, Field)
                    else {"const": entry}
                    for entry in self.whitelist
                ]
            }
        elif self.inner_type is not None:
            schema["items"] = self.inner_type._json_schema(depth=depth + 1, max_depth=max_depth)
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        if self.max_items is not None:
            schema["maxItems"] = self.max_items
        return schema

    def cast(self, value: Any) -> Any:
        if not isinstance(value, list) or self.whitelist or self.inner_type is None:
            return value
        return [self.inner_type.cast(element) for element in value]


@dataclass
class ObjectField(Field):
    """Object with named, ordered child fields."""

    kind: ClassVar[FieldKind] = FieldKind.OBJECT

    fields: Mapping[str, Field] = dataclass_field(default_factory=dict)

    def shape(self, fields: Mapping[str, Field]) -> ObjectField:
        """Return a copy with *fields* added after the existing children."""
        merged = dict(self.fields)
        merged.update(fields)
        return replace(self, fields=merged)

    def _json_schema(self, *, depth: int, max_depth: int) -> dict[str, Any]:
        self._check_depth(depth, max_depth)
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {
                name: child._json_schema(depth=depth + 1, max_depth=max_depth)
                for name, child in self.fields.items()
            },
        }
        required = [name for name, child in self.fields.items() if child.is_required]
        if required:
            schema["required"] = required
        return schema

    def cast(self, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            key: self.fields[key].cast(item) if key in self.fields else item
            for key, item in value.items()
        }


AnyField = Union[StringField, NumberField, BooleanField, DateField, ArrayField, ObjectField]


def string() -> StringField:
    """Return an optional string field."""
    return StringField()


def number() -> NumberField:
    """Return an optional number field."""
    return NumberField()


def boolean() -> BooleanField:
    """Return an optional boolean field."""
    return BooleanField()


def date() -> DateField:
    """Return an optional date field accepting :mod:`datetime` values."""
    return DateField()


def array(inner: Field | None = None) -> ArrayField:
    """Return an optional array field whose elements follow *inner*."""
    return ArrayField(inner_type=inner)


def obj(fields: Mapping[str, Field] | None = None) -> ObjectField:
    """Return an optional object field with the children in *fields*."""
    return ObjectField(fields=dict(fields or {}))


def _format_error(error: ValidationError) -> str:
    location = ".".join(str(part) for part in error.absolute_path) or "this"
    return f"{location}: {error.message}"
