"""Command line front end: resolve specifiers and print the results."""

from __future__ import annotations

import json
import logging
import os
import shlex
import sys
from typing import Any, Dict, List, Optional, TextIO

from .args import parse_args
from .common.logging_utils import configure_logging
from .config import ResolverSettings, load_settings
from .constants import Constants, ExitCodes, ExperimentalFlags
from .errors import ResolverError
from .resolver import Resolver, normalize_parent_url
from .utils import directory_to_file_url

logger = logging.getLogger(__name__)


def _setup_logging(args: Any, settings: ResolverSettings) -> None:
    """Configure logging from settings, then add a file handler if asked."""
    configure_logging(settings.log_level)

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def build_settings(args: Any) -> ResolverSettings:
    """Merge command line options over the configured settings."""
    settings = load_settings(
        config_path=args.CONFIG,
        overrides={
            "conditions": args.CONDITIONS,
            "enable_cache": False if args.NO_CACHE else None,
            "log_level": args.LOG_LEVEL,
        },
    )

    if args.WASM_MODULES:
        flags = settings.experimental_flags
        if flags is None:
            flags = shlex.split(os.environ.get(Constants.ENV_NODE_OPTIONS, ""))
        if ExperimentalFlags.WASM_MODULES.value not in flags:
            flags = [*flags, ExperimentalFlags.WASM_MODULES.value]
        settings.experimental_flags = flags

    return settings


def resolve_all(
    resolver: Resolver,
    specifiers: List[str],
    parent_url: str,
    enable_cache: bool = True,
) -> List[Dict[str, Optional[str]]]:
    """Resolve each specifier, recording failures instead of raising.

    Returns:
        One record per specifier, with ``path`` and ``format`` on success or
        ``error`` and ``message`` on failure.
    """
    records: List[Dict[str, Optional[str]]] = []
    for specifier in specifiers:
        try:
            resolution = resolver.resolve(specifier, parent_url, enable_cache)
        except ResolverError as exc:
            records.append({
                "specifier": specifier,
                "error": type(exc).__name__,
                "message": str(exc),
            })
            continue
        records.append({"specifier": specifier, **resolution.to_dict()})
    return records


def write_records(records: List[Dict[str, Optional[str]]], output_format: str, stream: TextIO) -> None:
    if output_format == "text":
        for record in records:
            if "error" in record:
                stream.write(f"{record['specifier']}\tERROR\t{record['message']}\n")
            else:
                stream.write(
                    f"{record['specifier']}\t{record['format'] or '-'}\t{record['path']}\n"
                )
        return

    json.dump(records, stream, indent=2)
    stream.write("\n")


def run(argv: Optional[List[str]] = None, stream: Optional[TextIO] = None) -> int:
    """Run the command and return its exit code.

    Args:
        argv: Arguments, without the program name. Defaults to ``sys.argv``.
        stream: Where results are written. Defaults to stdout.
    """
    try:
        args = parse_args(argv)
    except SystemExit as exc:
        return ExitCodes.SUCCESS.value if exc.code == 0 else ExitCodes.USAGE_ERROR.value

    settings = build_settings(args)
    _setup_logging(args, settings)

    if args.PARENT:
        parent_url = normalize_parent_url(args.PARENT)
    else:
        parent_url = directory_to_file_url(os.getcwd())

    resolver = settings.create_resolver()
    records = resolve_all(resolver, args.specifiers, parent_url, settings.enable_cache)
    write_records(records, args.OUTPUT_FORMAT, stream or sys.stdout)

    failed = sum(1 for record in records if "error" in record)
    if failed:
        logger.debug("%d of %d specifiers failed to resolve", failed, len(records))
        return ExitCodes.RESOLUTION_ERROR.value
    return ExitCodes.SUCCESS.value


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
