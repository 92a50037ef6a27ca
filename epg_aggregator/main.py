import argparse
import asyncio
import logging
import sys

from epg_aggregator.config import settings, setup_logging
from epg_aggregator.exceptions import EPGError
from epg_aggregator.services import build_epg, refresh_roster


logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="epg-aggregator",
        description="Fetch every roster channel's schedule and write one XMLTV guide.",
    )
    parser.add_argument(
        "--refresh-channels",
        action="store_true",
        help=f"Discover channels from the provider and rewrite {settings.channels_file} instead",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run once; returns the process exit code"""
    args = _parse_args(argv)
    setup_logging()
    settings.log_configuration()

    if args.refresh_channels:
        logger.info("Starting channel roster refresh...")
        task, failure = refresh_roster, "Failed to refresh channel roster"
    else:
        logger.info("Starting EPG update process...")
        task, failure = build_epg, "Failed to update EPG XML"

    try:
        result = asyncio.run(task(settings))
    except EPGError as e:
        logger.error(f"{failure}: {e}", exc_info=True)
        return 1

    if args.refresh_channels:
        logger.info(f"Channel roster refresh completed successfully ({result['channels']} channels).")
    else:
        logger.info(
            f"EPG update completed successfully: {result['channels_succeeded']}/{result['channels_requested']} channels, "
            f"{result['programmes_written']} programmes written to {result['output_path']}."
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
