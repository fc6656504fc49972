"""HTML documentation page generation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

SWAGGER_UI_ASSETS = "https://unpkg.com/swagger-ui-dist@5"

_TEMPLATE_ENV = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent / "templates"),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def render_docs(
    document: Mapping[str, Any],
    *,
    spec_url: str | None = None,
    assets_url: str = SWAGGER_UI_ASSETS,
) -> str:
    """Render a Swagger UI page for *document*.

    The page loads the document from *spec_url* when given, otherwise the
    document is embedded in the page.
    """
    info = document.get("info") or {}
    context = {
        "title": info.get("title", "API documentation"),
        "version": info.get("version"),
        "spec_url": spec_url,
        "document": dict(document),
        "assets_url": assets_url.rstrip("/"),
    }
    return _TEMPLATE_ENV.get_template("docs.html.j2").render(context)


def generate_docs(
    document: Mapping[str, Any],
    output: str | Path,
    *,
    spec_url: str | None = None,
) -> None:
    """Write the documentation page for *document* to *output*."""
    rendered = render_docs(document, spec_url=spec_url)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")
