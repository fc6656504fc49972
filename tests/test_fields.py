"""Tests for validation field nodes."""

from __future__ import annotations

import datetime as dt

import pytest

from oas_tools.errors import FieldValidationError, MaxDepthExceeded
from oas_tools.fields import (
    FieldKind,
    Presence,
    array,
    boolean,
    date,
    number,
    obj,
    string,
)


def test_builder_methods_return_new_nodes() -> None:
    base = string()
    required = base.required()
    described = required.meta(description="user name")

    assert base.presence is Presence.OPTIONAL
    assert base.metadata is None
    assert required.presence is Presence.REQUIRED
    assert required.metadata is None
    assert described.metadata == {"description": "user name"}
    assert described.is_required


def test_meta_merges_into_fresh_mapping() -> None:
    first = number().meta(example=3)
    second = first.meta(description="count")

    assert first.metadata == {"example": 3}
    assert second.metadata == {"example": 3, "description": "count"}


def test_kinds_are_closed() -> None:
    assert [kind.value for kind in FieldKind] == [
        "string",
        "number",
        "boolean",
        "date",
        "array",
        "object",
    ]
    assert obj().kind is FieldKind.OBJECT
    assert array().kind is FieldKind.ARRAY


def test_validate_missing_required_value() -> None:
    with pytest.raises(FieldValidationError) as excinfo:
        string().required().validate(None)
    assert excinfo.value.errors == ["this is a required field"]

    assert string().validate(None) is None


def test_validate_strict_rejects_uncast_values() -> None:
    with pytest.raises(FieldValidationError) as excinfo:
        number().validate("5")
    assert excinfo.value.errors == ["this: '5' is not of type 'number'"]


def test_validate_non_strict_casts_values() -> None:
    assert number().validate("5", strict=False) == 5
    assert number().validate("2.5", strict=False) == 2.5
    assert boolean().validate("false", strict=False) is False
    assert string().validate(12, strict=False) == "12"
    moment = date().validate("2024-01-02T03:04:05Z", strict=False)
    assert moment == dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=dt.timezone.utc)


def test_validate_non_strict_casts_nested_values() -> None:
    schema = obj({"ids": array(number()), "active": boolean()})
    value = schema.validate({"ids": ["1", "2"], "active": "true"}, strict=False)
    assert value == {"ids": [1, 2], "active": True}


def test_validate_date_accepts_datetime_objects() -> None:
    assert date().validate(dt.date(2024, 1, 2)) == dt.date(2024, 1, 2)
    with pytest.raises(FieldValidationError):
        date().validate("2024-01-02")


def test_validate_collects_all_errors_in_order() -> None:
    schema = obj({"a": string().required(), "b": number().required()})

    with pytest.raises(FieldValidationError) as excinfo:
        schema.validate({}, abort_early=False)
    assert excinfo.value.errors == [
        "this: 'a' is a required property",
        "this: 'b' is a required property",
    ]

    with pytest.raises(FieldValidationError) as excinfo:
        schema.validate({})
    assert excinfo.value.errors == ["this: 'a' is a required property"]


def test_validate_reports_nested_paths() -> None:
    schema = obj({"owner": obj({"age": number()})})
    with pytest.raises(FieldValidationError) as excinfo:
        schema.validate({"owner": {"age": "old"}})
    assert excinfo.value.errors == ["owner.age: 'old' is not of type 'number'"]


def test_validate_constraints() -> None:
    with pytest.raises(FieldValidationError, match="too short"):
        string().min(3).validate("ab")
    with pytest.raises(FieldValidationError, match="does not match"):
        string().matches(r"^[a-z]+$").validate("ABC")
    with pytest.raises(FieldValidationError, match="less than the minimum"):
        number().min(1).validate(0)
    with pytest.raises(FieldValidationError, match="not of type 'integer'"):
        number().integer().validate(1.5)
    with pytest.raises(FieldValidationError, match="too long"):
        array(number()).max(1).validate([1, 2])


def test_array_whitelist_accepts_listed_alternatives() -> None:
    schema = array().one_of([string(), 5])

    assert schema.validate(["a", 5]) == ["a", 5]
    with pytest.raises(FieldValidationError):
        schema.validate([6])


def test_object_shape_appends_fields() -> None:
    schema = obj({"a": string()}).shape({"b": number()})
    assert list(schema.fields) == ["a", "b"]


def test_json_schema_depth_is_bounded() -> None:
    nested = obj({"items": array(obj({"id": number()}))})

    assert nested.to_json_schema(max_depth=3)["properties"]["items"]["items"]["type"] == "object"
    with pytest.raises(MaxDepthExceeded, match="maximum depth of 2"):
        nested.to_json_schema(max_depth=2)
    with pytest.raises(MaxDepthExceeded):
        nested.validate({"items": []}, max_depth=1)


def test_cyclic_tree_fails_validation_with_max_depth() -> None:
    node = obj({"name": string()})
    node.fields["next"] = node

    with pytest.raises(MaxDepthExceeded):
        node.validate({"name": "a"})
