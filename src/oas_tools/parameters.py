"""Parameter extraction from query, path and header field groups."""

from __future__ import annotations

import enum
from typing import Any

from oas_tools.errors import InvalidSchemaShape
from oas_tools.fields import DEFAULT_MAX_DEPTH, Field, ObjectField
from oas_tools.translate import schema_object


class ParameterLocation(str, enum.Enum):
    """Values of a parameter's ``in`` entry."""

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"


def extract_parameters(
    location: ParameterLocation | str,
    group: Field,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[dict[str, Any]]:
    """Return one parameter object per child of *group*, in declaration order."""
    location = ParameterLocation(location)
    if not isinstance(group, ObjectField):
        kind = getattr(group, "kind", type(group).__name__)
        raise InvalidSchemaShape(f"{location.value} parameters", kind)

    parameters: list[dict[str, Any]] = []
    for name, child in group.fields.items():
        parameter: dict[str, Any] = {
            "in": location.value,
            "name": name,
            "schema": schema_object(child, name, max_depth=max_depth),
            "required": child.is_required,
        }
        description = (child.metadata or {}).get("description")
        if description is not None:
            parameter["description"] = description
        parameters.append(parameter)
    return parameters
