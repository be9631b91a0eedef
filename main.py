"""CLI entry point for the candidate factsheet builder."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from src.core.config import Settings
from src.core.errors import PackagingError, ValidationError
from src.core.schemas import JobRequest
from src.pipeline.orchestrator import new_job_id, run_job
from src.pipeline.toolkit import Toolkit


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Candidate factsheets - render, merge resumes, and zip per batch",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- serve subcommand ---
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: built-in defaults)",
    )
    serve_parser.add_argument("--host", default=None, help="Override api.host")
    serve_parser.add_argument("--port", type=int, default=None, help="Override api.port")
    serve_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- run subcommand ---
    run_parser = subparsers.add_parser("run", help="Process one batch from a JSON file")
    run_parser.add_argument(
        "--input",
        required=True,
        help='Path to batch JSON ({"candidates": [...]})',
    )
    run_parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: built-in defaults)",
    )
    run_parser.add_argument("--org", default=None, help="Organization label for the archive name")
    run_parser.add_argument("--tenant", default=None, help="Tenant label for the archive name")
    run_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(config_path: str | None) -> Settings:
    if config_path is None:
        return Settings.default()
    return Settings.from_yaml(config_path)


def load_request(path: str | Path, org: str | None, tenant: str | None) -> JobRequest:
    """Read a batch file; CLI labels override those in the file."""
    path = Path(path)
    if not path.exists():
        msg = f"Batch file not found: {path}"
        raise FileNotFoundError(msg)
    raw = json.loads(path.read_text())
    request = JobRequest.model_validate(raw)
    updates = {k: v for k, v in (("organization", org), ("tenant", tenant)) if v}
    return request.model_copy(update=updates) if updates else request


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    """Handle serve subcommand."""
    import uvicorn

    from src.api.app import create_app

    host = args.host or settings.api.host
    port = args.port or settings.api.port
    uvicorn.run(create_app(settings), host=host, port=port)


def cmd_run(args: argparse.Namespace, settings: Settings) -> None:
    """Handle run subcommand."""
    request = load_request(args.input, args.org, args.tenant)
    toolkit = Toolkit.from_settings(settings)
    result = asyncio.run(
        run_job(new_job_id(), request.candidates, settings, toolkit, request.labels()),
    )
    print(json.dumps(result.to_response(), indent=2))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, PydanticValidationError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "serve":
        cmd_serve(args, settings)
    else:
        try:
            cmd_run(args, settings)
        except (FileNotFoundError, json.JSONDecodeError, PydanticValidationError, ValidationError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except PackagingError as e:
            print(f"Error: failed to zip files: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
