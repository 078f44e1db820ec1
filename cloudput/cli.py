"""Command line interface for cloudput."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from rich.logging import RichHandler

from . import __version__
from .cli_progress import PutProgressDisplay, console, render_configuration_summary
from .errors import CloudPutError
from .models import CHUNK_SIZE, DEFAULT_API_URL, UploadConfig
from .orchestrator import PutOrchestrator
from .protocols import IStorageClient
from .services.api_client import ContentAPIClient


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _resolve_log_level(debug: bool, silent: bool, log_level: Optional[str]) -> Optional[int]:
    """Level requested on the command line, or None for silent runs."""
    if silent:
        return None
    if debug:
        return logging.DEBUG
    if log_level:
        return getattr(logging, log_level.upper(), logging.INFO)
    return None


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Route log records through rich, sharing the progress console.

    Logging stays off unless --debug or --log-level asks for it.
    Returns the effective mode for the configuration summary.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    level = _resolve_log_level(debug, silent, log_level)
    if level is None:
        logging.disable(logging.CRITICAL)
        return "silent"

    logging.disable(logging.NOTSET)
    handler = RichHandler(console=console, markup=False, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _parse_env_line(raw_line: str) -> Optional[Tuple[str, str]]:
    """KEY=value pair from one .env line; None for blanks, comments and junk."""
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#"):
        return None

    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    return key, value


def _load_env_file(path: Path, override: bool = False) -> Dict[str, str]:
    """Export the variables of a .env file; returns the ones actually set."""
    if not path.is_file():
        reason = "not found" if not path.exists() else "is not a file"
        raise CLIError(f"env file {reason}: {path}")
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    applied: Dict[str, str] = {}
    for entry in map(_parse_env_line, lines):
        if entry is None:
            continue
        key, value = entry
        if override or key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    return applied


def _build_config(args: argparse.Namespace) -> UploadConfig:
    token = args.token or os.getenv("CLOUDPUT_ACCESS_TOKEN") or ""
    if not token:
        raise CLIError("no access token: pass --token or set CLOUDPUT_ACCESS_TOKEN")

    api_url = args.api_url or os.getenv("CLOUDPUT_API_URL") or DEFAULT_API_URL

    timeout = args.timeout
    if timeout is None:
        env_timeout = os.getenv("CLOUDPUT_TIMEOUT")
        try:
            timeout = float(env_timeout) if env_timeout else 300.0
        except ValueError as exc:
            raise CLIError(f"CLOUDPUT_TIMEOUT is not a number: {env_timeout!r}") from exc

    return UploadConfig(
        access_token=token,
        api_url=api_url,
        timeout=timeout,
        destination=args.destination or None,
        force=args.force,
        show_progress=not args.no_progress,
    )


async def _run_put(
    config: UploadConfig,
    sources: List[str],
    client: Optional[IStorageClient] = None,
) -> int:
    if client is None:
        async with ContentAPIClient(
            config.access_token,
            base_url=config.api_url,
            timeout=config.timeout,
        ) as api_client:
            return await _run_put(config, sources, api_client)

    with PutProgressDisplay(enabled=config.show_progress) as display:
        orchestrator = PutOrchestrator(
            client,
            chunk_size=CHUNK_SIZE,
            progress_factory=display.callback_for,
        )
        result = await orchestrator.put(sources, config.destination)

    display.on_finish(result)
    return 0 if result.all_success else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudput",
        description="Upload files to cloud storage.",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Access token (default from CLOUDPUT_ACCESS_TOKEN)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help=f"Content API URL (default from CLOUDPUT_API_URL or {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default from CLOUDPUT_TIMEOUT or 300)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cloudput {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")
    put = subparsers.add_parser("put", help="Upload files")
    put.add_argument("sources", nargs="*", help="Local files to upload")
    put.add_argument(
        "-d",
        "--destination",
        default=None,
        help="Remote folder to upload into (example: /backup/2026)",
    )
    put.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files",
    )
    put.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not draw progress bars",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file
    if used_env_file is None and Path(".env").is_file():
        used_env_file = Path(".env")
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = _build_config(args)
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if effective_log_mode != "silent":
        render_configuration_summary(
            {
                "Sources": len(args.sources),
                "Destination": config.destination or "(root)",
                "API": config.api_url,
                "Timeout": f"{config.timeout:g}s",
                "Env File": str(used_env_file) if used_env_file else "-",
                "Logging": effective_log_mode,
            }
        )

    try:
        return asyncio.run(_run_put(config, list(args.sources)))
    except CloudPutError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
