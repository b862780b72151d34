"""
Main Entry Point - Meta Ads API data dump

Parses command line flags, builds the run configuration and hands control to
the AccountOrchestrator. Exit status is 0 whenever discovery succeeded, even
if individual resource fetches failed.
"""

import argparse
import logging
from datetime import date, datetime
from typing import List, Optional

from .coreutils.config import TOKEN_ENV_VAR, Config
from .coreutils.env import env_get
from .coreutils.errors import ConfigError, DiscoveryError
from .coreutils.logging import setup_logging
from .orchestration.pipeline import AccountOrchestrator

logger = logging.getLogger(__name__)

TROUBLESHOOTING_TIPS = """Troubleshooting tips:
1. Verify your token is valid: curl "{base_url}/{api_version}/me?access_token=YOUR_TOKEN"
2. Check token has 'ads_read' permission in Graph API Explorer
3. Ensure token hasn't expired (long-lived tokens last 60 days)
4. Use --debug flag for more details"""


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}")


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"Must be >= 0: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Meta Ads API data dump")
    parser.add_argument(
        "--token", default="", help=f"Facebook access token (or set {TOKEN_ENV_VAR})"
    )
    parser.add_argument("--output", help="Output directory for JSON files (optional)")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument(
        "--max-pages",
        type=_non_negative_int,
        default=0,
        help="Maximum pages to fetch per endpoint (0 = unlimited)",
    )
    parser.add_argument("--since", type=_parse_date, help="Insights start date (YYYY-MM-DD)")
    parser.add_argument("--until", type=_parse_date, help="Insights end date (YYYY-MM-DD)")
    parser.add_argument("--log-dir", help="Also write logs to a dated file in this directory")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else logging.INFO, log_dir=args.log_dir)

    if not args.token and env_get(TOKEN_ENV_VAR):
        logger.info(f"Using access token from {TOKEN_ENV_VAR} environment variable")

    try:
        config = Config.from_env(
            access_token=args.token,
            output_dir=args.output,
            max_pages=args.max_pages,
            insights_since=args.since,
            insights_until=args.until,
        )
    except ConfigError as e:
        logger.error(f"❌ {e}")
        return 1

    logger.debug(f"Configuration: {config} (token {config.masked_token})")

    orchestrator = AccountOrchestrator(config)

    try:
        orchestrator.sink.prepare()
    except OSError as e:
        logger.error(f"❌ Failed to create output directory: {e}")
        return 1

    try:
        outcome = orchestrator.run()
    except DiscoveryError as e:
        logger.error(f"❌ {e}")
        logger.error(
            TROUBLESHOOTING_TIPS.format(base_url=config.base_url, api_version=config.api_version)
        )
        return 1

    if outcome.no_accounts:
        logger.info(
            "Make sure your token has 'ads_read' permission and you have access "
            "to at least one ad account."
        )
        return 0

    summary = outcome.summary()
    print(
        f"✅ Dump completed: {summary['accounts_successful']}/"
        f"{summary['accounts_processed']} accounts fully fetched "
        f"({summary['accounts_discovered']} discovered)"
    )
    return 0


if __name__ == "__main__":
    exit(main())
