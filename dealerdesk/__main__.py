"""Command line entry point: serve the API, run a search, or render a PDF."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from dealerdesk.config.loader import load_config
from dealerdesk.config.schema import Config
from dealerdesk.render.errors import RenderError
from dealerdesk.render.options import PRESETS
from dealerdesk.render.renderer import DocumentRenderer
from dealerdesk.search.aggregator import SearchAggregator
from dealerdesk.search.store import PostgrestEntityStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dealerdesk", description=__doc__)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    search = sub.add_parser("search", help="Run one global search and print the results")
    search.add_argument("query")

    render = sub.add_parser("render", help="Render an HTML file to PDF")
    render.add_argument("input", type=Path)
    render.add_argument("-o", "--output", type=Path, default=None)
    render.add_argument("--preset", choices=sorted(PRESETS), default="document")
    render.add_argument("--format", choices=("A4", "Letter"), default=None)
    render.add_argument("--landscape", action="store_true")
    return parser


async def run_search(config: Config, query: str) -> int:
    aggregator = SearchAggregator(PostgrestEntityStore(config.store), config.search)
    outcome = await aggregator.search_detailed(query)
    for index, result in enumerate(outcome.results, start=1):
        print(f"{index:2d}. [{result.type}] {result.title}")
        details = " | ".join(part for part in (result.subtitle, result.metadata) if part)
        if details:
            print(f"    {details}")
        print(f"    {result.link}")
    if not outcome.results:
        print("No results found.")
    if outcome.failed_sources:
        print(f"(unavailable: {', '.join(outcome.failed_sources)})", file=sys.stderr)
    return 0


async def run_render(config: Config, args: argparse.Namespace) -> int:
    html = args.input.read_text(encoding="utf-8")
    overrides: dict[str, str] = {}
    if args.format:
        overrides["format"] = args.format
    if args.landscape:
        overrides["orientation"] = "landscape"
    options = PRESETS[args.preset].merged(overrides)
    output = args.output or args.input.with_suffix(".pdf")

    renderer = DocumentRenderer(config.renderer)
    try:
        pdf = await renderer.generate_pdf(html, options)
    except RenderError as e:
        print(f"PDF export failed: {e}", file=sys.stderr)
        return 1
    finally:
        await renderer.close()

    output.write_bytes(pdf)
    print(f"PDF written to {output} ({len(pdf)} bytes)")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    config = load_config(args.config)

    if args.command == "serve":
        import uvicorn

        from dealerdesk.server.app import create_app

        if args.reload:
            uvicorn.run(
                "dealerdesk.server.app:create_app",
                factory=True,
                host=args.host or config.server.host,
                port=args.port or config.server.port,
                reload=True,
            )
        else:
            uvicorn.run(
                create_app(config),
                host=args.host or config.server.host,
                port=args.port or config.server.port,
            )
        return 0

    if args.command == "search":
        return asyncio.run(run_search(config, args.query))

    return asyncio.run(run_render(config, args))


if __name__ == "__main__":
    raise SystemExit(main())
