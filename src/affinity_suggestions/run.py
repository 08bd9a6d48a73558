"""
CLI runner for the affinity suggestion client.

Usage:
    python -m affinity_suggestions.run [OPTIONS] COMMAND ...

    # Fetch suggestions for business user 1, work offer 2
    python -m affinity_suggestions.run fetch 1 2

    # Accept / discard a suggestion from batch abc
    python -m affinity_suggestions.run accept abc 1 123 2
    python -m affinity_suggestions.run discard abc 1 123 2
"""

import argparse
import logging
import sys
from pathlib import Path

from .client import SuggestionClient
from .config import ConfigError, SuggestionConfig
from .models import DecisionAction, Outcome

logger = logging.getLogger("affinity-suggestions")


def run_command(client: SuggestionClient, args: argparse.Namespace) -> Outcome:
    """Dispatch one parsed command to the client."""
    if args.command == "fetch":
        return client.fetch(args.business_user_id, args.work_offer_id)

    action = DecisionAction.ACCEPT if args.command == "accept" else DecisionAction.DISCARD
    return client.record_decision(
        args.uuid,
        args.business_user_id,
        args.match_user_id,
        args.work_offer_id,
        action,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="affinity-suggestions: query the affinity matching service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Fetch suggestions
    python -m affinity_suggestions.run fetch 1 2

    # Record a decision
    python -m affinity_suggestions.run accept abc 1 123 2

    # Use a specific config file and environment
    python -m affinity_suggestions.run --config suggestion.yaml --environment staging fetch 1 2
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=Path("suggestion.yaml"),
        help="Path to config file (default: suggestion.yaml)",
    )
    parser.add_argument(
        "--environment",
        type=str,
        help="Override environment from config",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    fetch = subparsers.add_parser("fetch", help="Fetch ranked suggestions")
    fetch.add_argument("business_user_id", type=int)
    fetch.add_argument("work_offer_id", type=int)

    for name, help_text in (("accept", "Accept a suggestion"), ("discard", "Discard a suggestion")):
        decision = subparsers.add_parser(name, help=help_text)
        decision.add_argument("uuid", type=str)
        decision.add_argument("business_user_id", type=int)
        decision.add_argument("match_user_id", type=int)
        decision.add_argument("work_offer_id", type=int)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = SuggestionConfig.from_yaml(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 1
    if args.environment:
        config.environment = args.environment

    logger.info(f"Config loaded from {args.config}")
    logger.info(f"Environment: {config.environment}")

    try:
        client = SuggestionClient(config=config)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    with client:
        outcome = run_command(client, args)

    print(outcome.to_json())
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())
