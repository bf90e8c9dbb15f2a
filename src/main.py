# src/main.py — v2
"""CLI entry point: serve, ask, digest commands.

Usage:
    trendscout serve [--host HOST] [--port PORT]
    trendscout ask "<question>"
    trendscout digest daily|weekly [--no-deliver]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from trendscout.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from trendscout.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return args.func(args, settings)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def cli() -> None:
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="trendscout",
        description=f"trendscout v{__version__} - trending GitHub repositories on demand",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Run the HTTP service")
    p_serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    p_serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")
    p_serve.set_defaults(func=_cmd_serve)

    # --- ask ---
    p_ask = subparsers.add_parser("ask", help="Answer one question and exit")
    p_ask.add_argument("question", help="Natural-language question")
    p_ask.set_defaults(func=_cmd_ask)

    # --- digest ---
    p_digest = subparsers.add_parser("digest", help="Run a scheduled digest once")
    p_digest.add_argument("kind", choices=["daily", "weekly"])
    p_digest.add_argument(
        "--no-deliver", action="store_true",
        help="Print the digest instead of posting it to the webhook",
    )
    p_digest.set_defaults(func=_cmd_digest)

    return parser


def _cmd_serve(args: argparse.Namespace, settings) -> int:
    """Run the FastAPI app under uvicorn."""
    import uvicorn

    from trendscout.api.app import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


def _cmd_ask(args: argparse.Namespace, settings) -> int:
    """Resolve a single question through the full pipeline."""
    return asyncio.run(_ask(args.question, settings))


async def _ask(question: str, settings) -> int:
    from trendscout.api.state import build_state
    from trendscout.core.errors import InvalidRequest, NoDataAvailable

    state = build_state(settings)
    try:
        resolution = await state.pipeline.resolve(question)
    except NoDataAvailable as exc:
        print(f"Error: {exc.suggestion}", file=sys.stderr)
        return 1
    except InvalidRequest as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 2
    finally:
        await state.aclose()
    print(resolution.text)
    return 0


def _cmd_digest(args: argparse.Namespace, settings) -> int:
    return asyncio.run(_digest(args.kind, not args.no_deliver, settings))


async def _digest(kind: str, deliver: bool, settings) -> int:
    from trendscout.api.state import build_state
    from trendscout.scheduler.digest import DIGEST_JOBS, run_digest

    state = build_state(settings)
    try:
        channel = state.channel if deliver else None
        if deliver and channel is None:
            logger.error("EXTERNAL_WEBHOOK_URL is not configured; use --no-deliver")
            return 1
        resolution = await run_digest(DIGEST_JOBS[kind], state.pipeline, channel)
    finally:
        await state.aclose()
    if resolution is None:
        return 1
    if not deliver:
        print(resolution.text)
    return 0


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging from settings; --verbose forces DEBUG."""
    from trendscout.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
