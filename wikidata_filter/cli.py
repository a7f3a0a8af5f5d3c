"""Command-line interface for wikidata-filter using jsonargparse."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv
from jsonargparse import ActionConfigFile, ArgumentParser
from jsonargparse.typing import NonNegativeInt, PositiveInt
from tqdm.contrib.logging import logging_redirect_tqdm

load_dotenv(override=True)

from wikidata_filter.cancellation import CancellationController, CancellationToken
from wikidata_filter.config import Settings, get_settings
from wikidata_filter.errors import FatalError
from wikidata_filter.identifiers import fetch_identifier_properties
from wikidata_filter.pipeline import FilterPipeline
from wikidata_filter.tables import DATA_DIR, IDENTIFIER_PROPERTIES_FILE, ReferenceTables

logger = logging.getLogger("wikidata_filter.cli")

EXIT_OK = 0
EXIT_INTERRUPTED = 1
EXIT_FATAL = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _handle_filter(settings: Settings, args) -> int:
    data_dir = args.data_dir or settings.data_dir
    tables = ReferenceTables.load(Path(data_dir) if data_dir else None)

    threads = args.threads if args.threads is not None else settings.default_threads
    output_dir = Path(args.output_dir) if args.output_dir else settings.output_dir

    token = CancellationToken()
    pipeline = FilterPipeline(
        tables,
        token,
        output_dir=output_dir,
        threads=threads,
        labels=args.labels,
        statement_counts=args.statement_counts,
        skip=args.skip,
        batch_size=settings.batch_size,
        progress_interval=settings.progress_interval,
        compresslevel=settings.compress_level,
        progress=args.progress,
    )

    with CancellationController(token), logging_redirect_tqdm():
        summary = pipeline.run(args.paths)

    if summary.interrupted:
        logger.warning("Processing was interrupted before all input was read")
        return EXIT_INTERRUPTED
    return EXIT_OK


def _handle_fetch_identifiers(settings: Settings, args) -> int:
    fetch_identifier_properties(
        endpoint=args.endpoint or settings.sparql_endpoint,
        user_agent=settings.user_agent,
        output=Path(args.output),
    )
    return EXIT_OK


def build_parser() -> tuple[ArgumentParser, dict[str, Any]]:
    parser = ArgumentParser(
        prog="wikidata-filter", description="Filter Wikidata N-Triples dumps"
    )
    parser.add_argument("--config", action=ActionConfigFile, help="Path to a configuration file")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")

    subparsers = parser.add_subcommands()
    handlers: dict[str, Any] = {}

    filter_cmd = ArgumentParser(
        prog="wikidata-filter filter",
        description="Filter statements, extract labels and count statements per entity",
    )
    filter_cmd.add_argument("paths", nargs="+", help="Compressed dump files, processed in order")
    filter_cmd.add_argument("--labels", action="store_true", help="Write labels_<worker>.bz2")
    filter_cmd.add_argument(
        "--statement-counts", action="store_true", help="Write statement_counts.bz2"
    )
    filter_cmd.add_argument(
        "--skip", type=NonNegativeInt, default=0, help="Discard the first N lines"
    )
    filter_cmd.add_argument(
        "--threads",
        type=Optional[PositiveInt],
        default=None,
        help="Worker threads (default: CPU count)",
    )
    filter_cmd.add_argument("--output-dir", default=None, help="Directory for output files")
    filter_cmd.add_argument(
        "--data-dir", default=None, help="Directory with alternative reference tables"
    )
    filter_cmd.add_argument("--progress", action="store_true", help="Show a progress bar")
    subparsers.add_subcommand("filter", filter_cmd)
    handlers["filter"] = _handle_filter

    fetch_cmd = ArgumentParser(
        prog="wikidata-filter fetch-identifiers",
        description="Refresh the identifier property list from the Wikidata query service",
    )
    fetch_cmd.add_argument("--endpoint", default=None, help="SPARQL endpoint URL")
    fetch_cmd.add_argument(
        "--output",
        default=str(DATA_DIR / IDENTIFIER_PROPERTIES_FILE),
        help="Where to write the property ids",
    )
    subparsers.add_subcommand("fetch-identifiers", fetch_cmd)
    handlers["fetch-identifiers"] = _handle_fetch_identifiers

    return parser, handlers


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser, handlers = build_parser()
    args = parser.parse_args(argv)

    command = getattr(args, "subcommand", None)
    if not command:
        parser.print_help()
        parser.exit(2, "\nNo command provided.\n")

    handler = handlers.get(command)
    if handler is None:
        parser.error(f"Unknown command '{command}'")

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        return handler(settings, args[command])
    except (FatalError, OSError) as e:
        logger.error("%s", e)
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
