"""Accumulation of translated fragments into an OpenAPI document."""

from __future__ import annotations

import copy
import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Mapping

from oas_tools.config import ToolConfig
from oas_tools.errors import InvalidMetadata
from oas_tools.fields import Field, obj, string
from oas_tools.paths import HTTP_METHODS, build_path_item
from oas_tools.schema import load_document, load_field_schemas
from oas_tools.translate import schema_object

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.1.0"

_TAG_FIELD = obj(
    {
        "name": string().required(),
        "description": string().required(),
    }
)


def default_document() -> dict[str, Any]:
    """Return a minimal, empty OpenAPI document."""
    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": "API documentation", "version": "0.1.0"},
        "paths": {},
        "components": {"schemas": {}},
        "tags": [],
    }


class DocumentCollector:
    """Merge path items, schemas and tags into one OpenAPI document.

    Operations are keyed by ``(path, method)``: distinct pairs accumulate,
    adding the same pair again replaces the earlier operation.
    """

    def __init__(self, document: Mapping[str, Any] | None = None) -> None:
        base = default_document() if document is None else copy.deepcopy(dict(document))
        base.setdefault("openapi", OPENAPI_VERSION)
        base.setdefault("paths", {})
        base.setdefault("components", {}).setdefault("schemas", {})
        base.setdefault("tags", [])
        self._document = base

    @classmethod
    def from_file(cls, path: str | Path) -> DocumentCollector:
        """Start from the JSON or YAML document at *path*."""
        return cls(load_document(path))

    @property
    def document(self) -> dict[str, Any]:
        """A copy of the merged document."""
        return copy.deepcopy(self._document)

    def set_info(self, *, title: str | None = None, version: str | None = None) -> None:
        """Override the title and version of the document."""
        info = self._document.setdefault("info", {})
        if title is not None:
            info["title"] = title
        if version is not None:
            info["version"] = version

    def add_path(self, path: str, method: str, operation: Mapping[str, Any]) -> None:
        """Set the operation for *method* on *path*."""
        method_key = method.lower()
        if method_key not in HTTP_METHODS:
            raise InvalidMetadata("method", method)
        operations = self._document["paths"].setdefault(path, {})
        if method_key in operations:
            logger.debug("replacing operation %s %s", method_key.upper(), path)
        operations[method_key] = copy.deepcopy(dict(operation))

    def add_paths(self, paths: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge a paths object (``{path: {method: operation}}``).

        Path item keys that are not HTTP methods (``parameters``, ``summary``,
        ``description``, ``servers`` ...) are stored as given.
        """
        for path, item in paths.items():
            for key, value in item.items():
                if str(key).lower() in HTTP_METHODS:
                    self.add_path(path, key, value)
                else:
                    self._document["paths"].setdefault(path, {})[key] = copy.deepcopy(value)

    def add_path_item(self, fragment: Mapping[str, Mapping[str, Any]]) -> None:
        """Merge a fragment produced by :func:`~oas_tools.paths.build_path_item`."""
        self.add_paths(fragment)

    def add_operation_schema(self, root: Field) -> dict[str, Any]:
        """Translate the root operation schema *root* and merge the result."""
        fragment = build_path_item(root)
        self.add_path_item(fragment)
        return fragment

    def add_schema(self, name: str, schema: Field | Mapping[str, Any]) -> None:
        """Register *schema* under ``components.schemas``.

        Fields are translated first; mappings are stored as given.
        """
        if isinstance(schema, Field):
            translated = schema_object(schema, name)
        else:
            translated = copy.deepcopy(dict(schema))
        self._document["components"]["schemas"][name] = translated

    def add_schemas(self, schemas: Mapping[str, Field | Mapping[str, Any]]) -> None:
        for name, schema in schemas.items():
            self.add_schema(name, schema)

    def add_tag(self, name: str, description: str) -> None:
        """Declare a tag; a tag with the same name is replaced."""
        _TAG_FIELD.validate({"name": name, "description": description}, abort_early=False)
        tags = [tag for tag in self._document["tags"] if tag.get("name") != name]
        tags.append({"name": name, "description": description})
        self._document["tags"] = tags

    def add_definitions_file(self, path: str | Path) -> None:
        """Merge the ``paths`` and ``schemas`` sections of a JSON or YAML file."""
        definitions = load_document(path)
        schemas = definitions.get("schemas")
        if schemas:
            self.add_schemas(schemas)
        paths = definitions.get("paths")
        if paths:
            self.add_paths(paths)

    def write(self, path: str | Path) -> Path:
        """Persist the document as JSON at *path*."""
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        rendered = json.dumps(self._document, indent=2, default=_encode_value)
        output_path.write_text(rendered + "\n", encoding="utf-8")
        return output_path


def _encode_value(value: Any) -> Any:
    if isinstance(value, dt.date):
        return value.isoformat()
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


def collect_document(config: ToolConfig) -> DocumentCollector:
    """Build a collector from everything *config* points at."""
    collector = (
        DocumentCollector.from_file(config.base) if config.base is not None else DocumentCollector()
    )
    collector.set_info(title=config.title, version=config.version)

    for name, description in config.tags.items():
        collector.add_tag(name, description)
    for definitions in config.definitions:
        logger.debug("merging definitions from %s", definitions)
        collector.add_definitions_file(definitions)
    for reference in config.schemas:
        for root in load_field_schemas(reference):
            fragment = collector.add_operation_schema(root)
            logger.debug("translated %s from %s", ", ".join(fragment), reference)
    return collector
