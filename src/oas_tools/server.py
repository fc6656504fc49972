"""Read-only documentation server."""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, jsonify

from oas_tools.codegen_html import render_docs
from oas_tools.config import DEFAULT_MOUNT
from oas_tools.schema import load_document

logger = logging.getLogger(__name__)


def create_app(document_path: str | Path, mount: str = DEFAULT_MOUNT) -> Flask:
    """Create a Flask app serving the persisted document at *document_path*.

    ``GET {mount}`` returns the documentation page and
    ``GET {mount}/openapi.json`` the document itself. The document is read
    once, when the app is created.
    """
    document = load_document(document_path)
    prefix = "/" + mount.strip("/")
    spec_url = f"{prefix.rstrip('/')}/openapi.json"
    logger.info("serving %s at %s", document_path, prefix)

    app = Flask(__name__)

    @app.get(prefix)
    def docs_page() -> str:
        return render_docs(document, spec_url=spec_url)

    @app.get(spec_url)
    def docs_document():
        return jsonify(document)

    return app
