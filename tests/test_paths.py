"""Tests for path item construction."""

from __future__ import annotations

import pytest

from oas_tools.errors import (
    InvalidExample,
    InvalidMetadata,
    InvalidSchemaShape,
    MaxDepthExceeded,
    MissingMetadata,
    MissingRequiredMetadataField,
)
from oas_tools.fields import array, boolean, number, obj, string
from oas_tools.paths import build_path_item, extract_metadata
from oas_tools.responses import validation_errors


def _user_schema():
    return obj(
        {
            "requestBody": obj(
                {
                    "name": string().required().meta(example="Ada"),
                    "roles": array(string()),
                }
            ),
            "query": obj({"notify": boolean()}),
            "params": obj({"id": number().required().meta(description="user id")}),
            "headers": obj({"x-request-id": string()}),
        }
    ).meta(path="/users/{id}", method="post")


def test_extract_metadata_defaults() -> None:
    meta = extract_metadata(obj().meta(path="/users/{id}", method="post"))

    assert meta.path == "/users/{id}"
    assert meta.method == "post"
    assert meta.summary == "No summary"
    assert meta.description == "No description"
    assert meta.responses is None
    assert meta.tags == []


def test_extract_metadata_requires_bag() -> None:
    with pytest.raises(MissingMetadata):
        extract_metadata(obj())


@pytest.mark.parametrize("missing", ["path", "method"])
def test_extract_metadata_requires_path_and_method(missing: str) -> None:
    meta = {"path": "/users", "method": "get"}
    del meta[missing]
    with pytest.raises(MissingRequiredMetadataField, match=missing) as excinfo:
        extract_metadata(obj().meta(meta))
    assert excinfo.value.field == missing


def test_extract_metadata_rejects_unknown_method() -> None:
    with pytest.raises(InvalidMetadata, match="method"):
        extract_metadata(obj().meta(path="/users", method="fetch"))


def test_extract_metadata_normalizes_method_and_tags() -> None:
    meta = extract_metadata(
        obj().meta(path="/users", method="GET", tag="users", tags=["admin"], security="bearer")
    )
    assert meta.method == "get"
    assert meta.tags == ["users", "admin"]
    assert meta.security == "bearer"


def test_build_path_item_defaults() -> None:
    fragment = build_path_item(obj().meta(path="/users/{id}", method="post"))

    operation = fragment["/users/{id}"]["post"]
    assert operation["summary"] == "No summary"
    assert operation["description"] == "No description"
    assert operation["parameters"] == []
    assert "requestBody" not in operation
    assert list(operation["responses"]) == ["200", "403", "default"]


def test_build_path_item_full_operation() -> None:
    root = _user_schema().meta(summary="Update user", description="Updates a user")

    fragment = build_path_item(root)

    assert list(fragment) == ["/users/{id}"]
    assert list(fragment["/users/{id}"]) == ["post"]
    operation = fragment["/users/{id}"]["post"]
    assert operation["summary"] == "Update user"
    assert operation["description"] == "Updates a user"
    assert [(p["in"], p["name"]) for p in operation["parameters"]] == [
        ("query", "notify"),
        ("path", "id"),
        ("header", "x-request-id"),
    ]
    assert operation["parameters"][1]["description"] == "user id"
    assert operation["parameters"][1]["required"] is True

    body_schema = operation["requestBody"]["content"]["application/json"]["schema"]
    assert body_schema == {
        "type": "object",
        "properties": {
            "name": {"type": "string", "example": "Ada"},
            "roles": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["name"],
    }


def test_build_path_item_validation_error_example() -> None:
    root = _user_schema()

    operation = build_path_item(root)["/users/{id}"]["post"]

    errors = operation["responses"]["403"]["content"]["application/json"]["schema"]
    expected = validation_errors(root.fields["requestBody"])
    assert errors["properties"]["errors"]["example"] == expected
    assert any("name" in message for message in expected)


def test_build_path_item_applies_response_overrides() -> None:
    root = obj().meta(
        path="/users",
        method="put",
        responses={409: {"description": "conflict"}},
    )

    responses = build_path_item(root)["/users"]["put"]["responses"]

    assert responses["409"] == {"description": "conflict"}
    assert responses["200"] == {"description": "success"}
    assert "403" in responses
    assert "default" in responses


def test_build_path_item_tags_and_security() -> None:
    root = obj().meta(path="/users", method="get", tags=["users"], security="bearer")

    operation = build_path_item(root)["/users"]["get"]

    assert operation["tags"] == ["users"]
    assert operation["security"] == [{"bearer": []}]


def test_build_path_item_requires_object_root() -> None:
    with pytest.raises(InvalidSchemaShape, match="root schema"):
        build_path_item(string().meta(path="/x", method="get"))


def test_build_path_item_requires_object_parameter_groups() -> None:
    root = obj({"query": string()}).meta(path="/x", method="get")
    with pytest.raises(InvalidSchemaShape, match="query parameters"):
        build_path_item(root)


def test_build_path_item_propagates_invalid_examples() -> None:
    root = obj({"requestBody": obj({"age": number().meta(example="old")})}).meta(
        path="/x", method="post"
    )
    with pytest.raises(InvalidExample, match="age"):
        build_path_item(root)


def test_build_path_item_checks_metadata_first() -> None:
    root = obj({"requestBody": obj({"age": number().meta(example="old")})})
    with pytest.raises(MissingMetadata):
        build_path_item(root)


def test_build_path_item_rejects_cyclic_request_body() -> None:
    body = obj({"name": string().required()})
    body.fields["self"] = body
    root = obj({"requestBody": body}).meta(path="/x", method="post")

    with pytest.raises(MaxDepthExceeded):
        build_path_item(root)


def test_build_path_item_passes_max_depth_to_parameters() -> None:
    root = obj({"query": obj({"filter": obj({"name": string()})})}).meta(
        path="/x", method="get"
    )

    with pytest.raises(MaxDepthExceeded, match="maximum depth of 0"):
        build_path_item(root, max_depth=0)
    parameters = build_path_item(root, max_depth=1)["/x"]["get"]["parameters"]
    assert parameters[0]["schema"]["properties"] == {"name": {"type": "string"}}
