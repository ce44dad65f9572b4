import argparse
import sys
from typing import List, Optional

from loguru import logger

from dupecleaner.cleaner import DuplicateCleaner
from dupecleaner.config import VERSION, build_config, load_user_config
from dupecleaner.errors import ConfigError, GatewayError
from dupecleaner.immich_api import ImmichGateway
from dupecleaner.log import init_logging

EPILOG = """\
Examples:
  # Synchronize albums only (dry run)
  %(prog)s --url http://localhost:2283 --api-key YOUR_KEY --dry-run

  # Synchronize albums and auto-delete duplicates
  %(prog)s -u http://localhost:2283 -k YOUR_KEY --auto-delete
"""


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dupecleaner",
        description=(
            f"Immich Duplicate Cleaner v{VERSION}\n\n"
            "Synchronize albums across duplicate assets and optionally remove duplicates."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    # Defaults of None mean "not given" so env/config file values can apply
    parser.add_argument("-u", "--url", default=None,
                        help="Immich server URL (e.g., http://localhost:2283)")
    parser.add_argument("-k", "--api-key", dest="api_key", default=None,
                        help="Immich API key")
    parser.add_argument("-d", "--auto-delete", dest="auto_delete", action="store_true", default=None,
                        help="Automatically delete lower-quality duplicates")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", default=None,
                        help="Preview actions without making changes")
    parser.add_argument("-y", "--yes", action="store_true", default=None,
                        help="Skip confirmation prompts")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="Enable verbose logging")
    parser.add_argument("--config", default=None,
                        help="Path to a JSON file with default settings")
    parser.add_argument("--version", action="version", version=f"Immich Duplicate Cleaner v{VERSION}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    overrides = {
        "url": args.url,
        "api_key": args.api_key,
        "auto_delete": args.auto_delete,
        "dry_run": args.dry_run,
        "yes": args.yes,
        "verbose": args.verbose,
    }

    init_logging(verbose=bool(args.verbose))

    try:
        config = build_config(overrides, load_user_config(args.config))
    except ConfigError as e:
        logger.error("Configuration error: {}", e)
        return 1

    init_logging(verbose=config.verbose)
    logger.info("Starting Immich Duplicate Cleaner v{}", VERSION)

    try:
        with ImmichGateway(config) as gateway:
            DuplicateCleaner(gateway, config).run()
    except GatewayError as e:
        logger.error("Failed to fetch duplicates: {}", e)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
