"""Configuration file handling for the command line."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - python<3.11
    import tomli as tomllib

from oas_tools.errors import ConfigError

DEFAULT_CONFIG_NAME = "oas-tools.toml"
DEFAULT_OUTPUT = "openapi.json"
DEFAULT_MOUNT = "/docs"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


@dataclass
class ToolConfig:
    """Settings read from an ``oas-tools.toml`` file.

    Relative paths are resolved against the directory of the config file.
    """

    output: Path
    base: Path | None = None
    title: str | None = None
    version: str | None = None
    definitions: list[Path] = field(default_factory=list)
    schemas: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    mount: str = DEFAULT_MOUNT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def load_config(path: str | Path) -> ToolConfig:
    """Load and check the configuration file at *path*."""
    config_path = Path(path)
    try:
        with config_path.open("rb") as handle:
            raw = tomllib.load(handle)
    except FileNotFoundError as err:
        raise ConfigError(f"config file '{config_path}' not found") from err
    except tomllib.TOMLDecodeError as err:
        raise ConfigError(f"config file '{config_path}' is not valid TOML: {err}") from err
    return parse_config(raw, config_path.resolve().parent)


def parse_config(raw: dict[str, Any], root: Path) -> ToolConfig:
    """Build a :class:`ToolConfig` from parsed TOML data."""
    document = _table(raw, "document")
    sources = _table(raw, "sources")
    server = _table(raw, "server")

    output = document.get("output", DEFAULT_OUTPUT)
    if not isinstance(output, str):
        raise ConfigError("config document output must be a string")
    base = document.get("base")
    if base is not None and not isinstance(base, str):
        raise ConfigError("config document base must be a string")
    title = _optional_string(document, "title", "config document title")
    version = _optional_string(document, "version", "config document version")

    definitions = _string_list(sources, "definitions", "config sources definitions")
    schemas = _string_list(sources, "schemas", "config sources schemas")

    tags_raw = raw.get("tags", [])
    if not isinstance(tags_raw, list):
        raise ConfigError("config tags must be an array of tables")
    tags: dict[str, str] = {}
    for entry in tags_raw:
        if not isinstance(entry, dict):
            raise ConfigError("config tag entries must be tables")
        name = entry.get("name")
        description = entry.get("description")
        if not isinstance(name, str) or not isinstance(description, str):
            raise ConfigError("config tag entries must define a name and a description")
        tags[name] = description

    mount = server.get("mount", DEFAULT_MOUNT)
    if not isinstance(mount, str) or not mount.startswith("/"):
        raise ConfigError("config server mount must be an absolute URL path")
    host = server.get("host", DEFAULT_HOST)
    if not isinstance(host, str):
        raise ConfigError("config server host must be a string")
    port = server.get("port", DEFAULT_PORT)
    if isinstance(port, bool) or not isinstance(port, int):
        raise ConfigError("config server port must be an integer")

    return ToolConfig(
        output=root / output,
        base=root / base if base is not None else None,
        title=title,
        version=version,
        definitions=[root / entry for entry in definitions],
        schemas=schemas,
        tags=tags,
        mount=mount,
        host=host,
        port=port,
    )


def _table(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"config {name} must be a table")
    return value


def _optional_string(table: dict[str, Any], key: str, description: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{description} must be a string")
    return value


def _string_list(table: dict[str, Any], key: str, description: str) -> list[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{description} must be a list of strings")
    return list(value)
