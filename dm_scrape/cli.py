"""Command-line entry point for the Daily Mail comment scraper."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_MAX_COMMENTS, DEFAULT_RETRIES, DEFAULT_TIMEOUT, ScrapeConfig
from .errors import ErrorKind, ScrapeError
from .logging_config import setup_logging
from .render import PlaywrightRenderClient
from .scraper import ClientFactory, run_scrape

_FAILURE_CONTEXT = {
    ErrorKind.INVALID_URL: "failed to parse article info",
    ErrorKind.RENDER_TIMEOUT: "failed to scrape comments",
    ErrorKind.RENDER_FAILURE: "failed to scrape comments",
    ErrorKind.DECODE_ERROR: "failed to parse comments",
    ErrorKind.RETRIES_EXHAUSTED: "failed to parse comments",
    ErrorKind.EXPORT_ERROR: "failed to save comments",
}


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"cannot be negative, got {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dm-scrape",
        description=(
            "Scrape reader comments from a Daily Mail article. "
            "Comments are saved to <article-name>-comments.csv."
        ),
    )
    parser.add_argument("url", help="Daily Mail article URL")
    parser.add_argument(
        "--output",
        default=Path("."),
        type=Path,
        help="Directory where the CSV file should be written",
    )
    parser.add_argument(
        "--max-comments",
        type=_positive_int,
        default=DEFAULT_MAX_COMMENTS,
        help="Maximum number of comments to request",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=DEFAULT_TIMEOUT,
        help="Seconds to wait for the comment page to load",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=0.0,
        help="Seconds to wait after network idle before reading the page",
    )
    parser.add_argument(
        "--retries",
        type=_non_negative_int,
        default=DEFAULT_RETRIES,
        help="How many times to re-render when the response is incomplete",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    parser.add_argument(
        "--any-host",
        action="store_true",
        help="Accept article URLs from hosts other than the Daily Mail",
    )
    parser.add_argument(
        "--log-format",
        choices=("json", "text"),
        default="json",
        help="Format of the log lines written to stderr",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def report_failure(error: ScrapeError) -> None:
    context = _FAILURE_CONTEXT[error.kind]
    sys.stderr.write(f"Failed to scrape, {context}: {error}\n")


def main(
    argv: Optional[Sequence[str]] = None,
    client_factory: ClientFactory = PlaywrightRenderClient,
) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, json_output=args.log_format == "json")

    try:
        config = ScrapeConfig(
            max_comments=args.max_comments,
            timeout=args.timeout,
            wait_after_load=args.wait,
            headless=not args.headful,
        )
    except ValueError as exc:
        sys.stderr.write(f"Failed to scrape, invalid configuration: {exc}\n")
        return 1

    try:
        asyncio.run(
            run_scrape(
                args.url,
                config,
                output_dir=args.output,
                max_retries=args.retries,
                validate_host=not args.any_host,
                client_factory=client_factory,
            )
        )
    except ScrapeError as exc:
        report_failure(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
