"""Loading of documents and field schema references."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any

import yaml

from oas_tools.errors import ConfigError
from oas_tools.fields import Field

YAML_SUFFIXES = {".yml", ".yaml"}


def load_document(path: str | Path) -> dict[str, Any]:
    """Load a JSON or YAML mapping from *path*.

    Parameters
    ----------
    path:
        Location of the file; the suffix selects the parser.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as err:
        raise ConfigError(f"'{source}' not found") from err
    try:
        if source.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as err:
        raise ConfigError(f"cannot parse '{source}': {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"'{source}' must contain a mapping at the top level")
    return data


def load_field_schemas(reference: str) -> list[Field]:
    """Import the root field schemas named by *reference* (``module:attribute``).

    The attribute may hold a single field or a sequence of fields.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigError(f"schema reference '{reference}' must look like 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as err:
        raise ConfigError(f"cannot import '{module_name}': {err}") from err

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as err:
            raise ConfigError(f"'{reference}' does not exist") from err

    if isinstance(target, Field):
        return [target]
    if isinstance(target, (list, tuple)) and all(isinstance(item, Field) for item in target):
        return list(target)
    raise ConfigError(f"'{reference}' must be a field or a sequence of fields")
