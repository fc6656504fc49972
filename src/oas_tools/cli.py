"""Command line interface for oas-tools."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from oas_tools.codegen_html import generate_docs
from oas_tools.collector import collect_document
from oas_tools.config import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_HOST,
    DEFAULT_MOUNT,
    DEFAULT_PORT,
    load_config,
)
from oas_tools.errors import OasToolsError
from oas_tools.schema import load_document

Handler = Callable[[argparse.Namespace], int]


def _handle_build(args: argparse.Namespace) -> int:
    """Collect all configured sources and write the document."""
    config = load_config(args.config)
    collector = collect_document(config)
    output = Path(args.output) if args.output else config.output
    collector.write(output)
    print(f"wrote {output}")
    return 0


def _handle_gen_docs(args: argparse.Namespace) -> int:
    """Write the HTML documentation page for a persisted document."""
    document = load_document(args.document)
    generate_docs(document, args.output, spec_url=args.spec_url)
    print(f"wrote {args.output}")
    return 0


def _handle_serve(args: argparse.Namespace) -> int:
    """Serve a persisted document over HTTP."""
    from oas_tools.server import create_app

    app = create_app(args.document, mount=args.mount)
    app.run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(prog="oas-tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="build an OpenAPI document")
    build.add_argument("-c", "--config", default=DEFAULT_CONFIG_NAME)
    build.add_argument("-o", "--output", help="override the configured output path")
    build.set_defaults(func=_handle_build)

    gen_docs = subparsers.add_parser("gen-docs", help="render an HTML documentation page")
    gen_docs.add_argument("document")
    gen_docs.add_argument("output")
    gen_docs.add_argument("--spec-url", help="load the document from this URL instead")
    gen_docs.set_defaults(func=_handle_gen_docs)

    serve = subparsers.add_parser("serve", help="serve a document over HTTP")
    serve.add_argument("document")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)
    serve.add_argument("--mount", default=DEFAULT_MOUNT)
    serve.set_defaults(func=_handle_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    handler: Handler = args.func
    try:
        return handler(args)
    except OasToolsError as err:
        print(f"oas-tools: error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
