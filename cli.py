"""
cli.py — Extract one article from the terminal.

Prints the article text (or, with --json, the full outcome including the
trace). Useful for checking why a particular site falls back to its
description.

Usage:
  uv run python cli.py https://example.com/story
  uv run python cli.py https://example.com/story --description "Feed blurb"
  uv run python cli.py https://example.com/story --environment browser --json

Exit code is 0 on SUCCESS, 1 on FALLBACK_TO_DESCRIPTION, 2 on TERMINAL_FAILURE.
"""

import argparse
import json
import sys

from config import settings
from extractor.orchestrator import ArticleExtractor
from extractor.outcome import ArticleRequest, OutcomeKind
from observability.log import configure_logging
from tools.fetch import transports_for

EXIT_CODES = {
    OutcomeKind.SUCCESS: 0,
    OutcomeKind.FALLBACK_TO_DESCRIPTION: 1,
    OutcomeKind.TERMINAL_FAILURE: 2,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract the article body from a news URL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("url", help="Article URL (http or https)")
    parser.add_argument(
        "--description",
        default="",
        help="Fallback text used when the page cannot be scraped",
    )
    parser.add_argument(
        "--environment",
        choices=["backend", "browser", "direct"],
        default=settings.environment,
        help="Transport order: backend = direct then relay, browser = relay only, direct = direct only",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full outcome (kind, reason, tier, transport, trace) as JSON",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(settings)

    extractor = ArticleExtractor(settings, transports=transports_for(args.environment, settings))
    outcome = extractor.extract(ArticleRequest(url=args.url, description=args.description))

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2, default=str))
    else:
        if outcome.used_fallback and not outcome.allows_summary:
            print("[Showing the article description: the full text could not be retrieved]\n")
        print(outcome.text)

    return EXIT_CODES[outcome.kind]


if __name__ == "__main__":
    sys.exit(main())
