"""Path item construction from root operation schemas.

A root operation schema is an object field whose children are recognised by
name: ``requestBody`` becomes the JSON request body, while the children of
``query``, ``params`` and ``headers`` become parameters. The root metadata
names the route::

    obj({"requestBody": obj({...})}).meta(path="/users", method="post")
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from oas_tools.errors import (
    InvalidMetadata,
    InvalidSchemaShape,
    MissingMetadata,
    MissingRequiredMetadataField,
)
from oas_tools.fields import DEFAULT_MAX_DEPTH, Field, ObjectField
from oas_tools.parameters import ParameterLocation, extract_parameters
from oas_tools.responses import assemble_responses
from oas_tools.translate import schema_object

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")
DEFAULT_SUMMARY = "No summary"
DEFAULT_DESCRIPTION = "No description"
JSON_MEDIA_TYPE = "application/json"

# named children of a root schema, in the order their parameters are emitted
PARAMETER_SLOTS = (
    ("query", ParameterLocation.QUERY),
    ("params", ParameterLocation.PATH),
    ("headers", ParameterLocation.HEADER),
)


@dataclass
class OperationMetadata:
    """Route information read from a root schema's metadata."""

    path: str
    method: str
    summary: str = DEFAULT_SUMMARY
    description: str = DEFAULT_DESCRIPTION
    responses: dict[Any, Any] | None = None
    tags: list[str] = field(default_factory=list)
    security: str | None = None


def extract_metadata(root: Field) -> OperationMetadata:
    """Read route metadata from *root*."""
    meta = root.metadata
    if meta is None:
        raise MissingMetadata()
    for required_field in ("path", "method"):
        if not meta.get(required_field):
            raise MissingRequiredMetadataField(required_field)

    method = meta["method"]
    if not isinstance(method, str) or method.lower() not in HTTP_METHODS:
        raise InvalidMetadata("method", method)

    responses = meta.get("responses")
    if responses is not None and not isinstance(responses, dict):
        raise InvalidMetadata("responses", responses)

    return OperationMetadata(
        path=str(meta["path"]),
        method=method.lower(),
        summary=meta.get("summary") or DEFAULT_SUMMARY,
        description=meta.get("description") or DEFAULT_DESCRIPTION,
        responses=copy.deepcopy(responses),
        tags=_normalize_tags(meta),
        security=meta.get("security"),
    )


def build_operation(
    root: Field,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[OperationMetadata, dict[str, Any]]:
    """Return the metadata and operation object described by *root*.

    *max_depth* bounds the nesting of every translated child.
    """
    if not isinstance(root, ObjectField):
        raise InvalidSchemaShape("root schema", getattr(root, "kind", type(root).__name__))

    meta = extract_metadata(root)
    children = root.fields

    operation: dict[str, Any] = {
        "summary": meta.summary,
        "description": meta.description,
    }
    if meta.tags:
        operation["tags"] = meta.tags
    if meta.security:
        operation["security"] = [{meta.security: []}]

    parameters: list[dict[str, Any]] = []
    for slot, location in PARAMETER_SLOTS:
        group = children.get(slot)
        if group is not None:
            parameters.extend(extract_parameters(location, group, max_depth=max_depth))
    operation["parameters"] = parameters

    request_body = children.get("requestBody")
    if request_body is not None:
        operation["requestBody"] = {
            "content": {
                JSON_MEDIA_TYPE: {
                    "schema": schema_object(request_body, "requestBody", max_depth=max_depth),
                },
            }
        }

    operation["responses"] = assemble_responses(request_body, meta.responses, max_depth=max_depth)
    return meta, operation


def build_path_item(root: Field, *, max_depth: int = DEFAULT_MAX_DEPTH) -> dict[str, Any]:
    """Translate *root* into a ``{path: {method: operation}}`` fragment."""
    meta, operation = build_operation(root, max_depth=max_depth)
    return {meta.path: {meta.method: operation}}


def _normalize_tags(meta: Any) -> list[str]:
    tags: list[str] = []
    for key in ("tag", "tags"):
        value = meta.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            tags.append(value)
        elif isinstance(value, (list, tuple)) and all(isinstance(tag, str) for tag in value):
            tags.extend(value)
        else:
            raise InvalidMetadata(key, value)
    return tags
