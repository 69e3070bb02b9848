"""CLI entrypoint for voxscribe."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import NoReturn

from voxscribe.config import AppConfig, load_config
from voxscribe.core import TranscriptionPipeline, build_response
from voxscribe.errors import (
    BackendError,
    TranscriptionError,
    UnexpectedTermination,
    UsageError,
)
from voxscribe.io import to_json
from voxscribe.recognition import Failed


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level CLI parser."""
    parser = _ArgumentParser(
        prog="voxscribe",
        description="Transcribe remote or local audio live in the terminal.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", parser_class=_ArgumentParser)

    transcribe = subparsers.add_parser("transcribe", help="Transcribe an audio file or URL")
    transcribe.add_argument("source", help="Local audio path or http(s) URL")
    transcribe.add_argument(
        "--format",
        default=None,
        help="Container format: any|alaw|amrnb|amrwb|flac|mp3|ogg|mulaw (default: from file name)",
    )
    transcribe.add_argument(
        "--backend",
        choices=["azure", "hf", "simulated"],
        default=None,
        help="Recognition backend (default: from profile)",
    )
    transcribe.add_argument("--language", default=None, help="Recognition language, e.g. en-US")
    transcribe.add_argument(
        "--json",
        action="store_true",
        help="Print the final transcript as JSON; live output goes to stderr.",
    )

    serve = subparsers.add_parser("serve", help="Run the voxscribe HTTP API")
    serve.add_argument("--host", default=None, help="Override API host")
    serve.add_argument("--port", type=int, default=None, help="Override API port")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI command and return the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.command is None:
            raise UsageError("a command is required")
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"ERROR: {exc.detail}", file=sys.stderr)
        return exc.exit_code

    config = load_config()
    _configure_logging(config, verbose=args.verbose)

    if args.command == "transcribe":
        return _transcribe(args, config)

    if args.command == "serve":
        try:
            import uvicorn
        except ModuleNotFoundError:
            print(
                "`voxscribe serve` requires uvicorn. Install project dependencies first.",
                file=sys.stderr,
            )
            return 1

        host = args.host or config.api_host
        port = args.port or config.api_port
        uvicorn.run(
            "voxscribe.api:app",
            host=host,
            port=port,
            workers=config.workers,
            reload=False,
        )
        return 0

    parser.print_usage(sys.stderr)
    print(f"ERROR: unknown command: {args.command}", file=sys.stderr)
    return UsageError.exit_code


def _transcribe(args: argparse.Namespace, config: AppConfig) -> int:
    stream = sys.stderr if args.json else sys.stdout
    pipeline = TranscriptionPipeline(
        config,
        backend=args.backend,
        language=args.language,
        stream=stream,
    )
    try:
        backend = pipeline.create_backend()
        audio = pipeline.open(pipeline.acquire(args.source, args.format))
    except TranscriptionError as exc:
        return report_error(exc)

    outcome = pipeline.recognize(backend, audio)
    if isinstance(outcome, Failed):
        return report_error(outcome.error)

    if args.json:
        print(to_json(build_response(outcome, pipeline, audio)))
    return 0


def report_error(error: TranscriptionError) -> int:
    """Write `error` to stderr and return its exit code."""
    if isinstance(error, BackendError):
        print(f"CANCELED: ErrorCode={error.code}", file=sys.stderr)
        print(f"CANCELED: ErrorDetails={error.details}", file=sys.stderr)
        print("CANCELED: Did you update the subscription info?", file=sys.stderr)
    elif isinstance(error, UnexpectedTermination):
        print(f"CANCELED: Reason={error.reason}", file=sys.stderr)
    else:
        print(f"ERROR: {error.detail}", file=sys.stderr)
    return error.exit_code


def _configure_logging(config: AppConfig, *, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


if __name__ == "__main__":
    raise SystemExit(main())
