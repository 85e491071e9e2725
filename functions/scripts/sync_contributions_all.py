"""
Recomputes contribution points for every profile, once or on an interval.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import get_settings
from backend.db import DbClient
from backend.dependencies import get_db_client
from profiles import profiles

logger = logging.getLogger(__name__)


def sync_all(db: DbClient, github_token: str | None, github_api_url: str) -> int:
    """Syncs every profile with a linked GitHub username. Returns how many were synced."""
    synced = 0
    for profile in profiles.list_profiles(db):
        if not profile.github_username:
            continue
        try:
            summary = profiles.sync_contributions(
                db,
                profile.uid,
                github_token=github_token,
                github_api_url=github_api_url,
            )
        except profiles.ProfileError as exc:
            logger.warning("Skipping %s: %s", profile.uid, exc)
            continue
        logger.info(
            "%s: %d merged PRs, %d points",
            profile.uid,
            summary.merged_pull_requests,
            summary.points,
        )
        synced += 1
    return synced


def main() -> int:
    parser = argparse.ArgumentParser(description="Skillync contribution sync")
    parser.add_argument(
        "--interval-seconds",
        type=int,
        default=3600,
        help="Seconds between sync runs",
    )
    parser.add_argument(
        "--jitter-seconds",
        type=int,
        default=120,
        help="Max random jitter added to sleep",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sync and exit",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    settings = get_settings()
    db = get_db_client()

    while True:
        try:
            synced = sync_all(db, settings.github_token, settings.github_api_url)
            logger.info("Sync complete, updated %d profiles", synced)
        except Exception as exc:
            logger.exception("Sync failed: %s", exc)

        if args.once:
            return 0

        sleep_for = args.interval_seconds + random.uniform(0, args.jitter_seconds)
        logger.info("Sleeping for %.1fs", sleep_for)
        time.sleep(sleep_for)


if __name__ == "__main__":
    raise SystemExit(main())
