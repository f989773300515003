"""Report on stored articles and per-source activity.

Usage:
    newsagg-status [--hours N] [--detailed]
"""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from newsagg.adapters.database import DatabaseManager
from newsagg.core.exceptions import DatabaseError
from newsagg.repositories.article_repository import SQLiteArticleStore
from newsagg.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def collect_status(hours: int, detailed: bool, database_url: Optional[str] = None) -> dict[str, Any]:
    """Gather the numbers shown by the status report."""
    since = datetime.now(timezone.utc) - timedelta(hours=hours)

    async with DatabaseManager(database_url) as connection:
        store = SQLiteArticleStore(connection)
        status: dict[str, Any] = {
            "hours": hours,
            "total_articles": await store.count_articles(),
            "recent_articles": await store.count_articles(since=since),
            "active_sources": await store.count_sources(active_only=True),
            "recent": await store.recent_articles(limit=5),
        }
        if detailed:
            status["breakdown"] = await store.source_breakdown(since)
        return status


def print_status(status: dict[str, Any]) -> None:
    hours = status["hours"]
    print("News Aggregation Status")
    print("=" * 40)
    rows = [
        ("Total articles:", status["total_articles"]),
        (f"Articles (last {hours}h):", status["recent_articles"]),
        ("Active sources:", status["active_sources"]),
    ]
    for label, value in rows:
        print(f"{label:<25}{value}")

    if "breakdown" in status:
        print()
        print(f"{'Source':<24} {'Total':>8} {'Last ' + str(hours) + 'h':>10} {'Status':>8}")
        print("-" * 53)
        for row in status["breakdown"]:
            print(
                f"{row['display_name'] or row['source_name']:<24} "
                f"{row['total_articles']:>8} {row['recent_articles']:>10} "
                f"{'active' if row['is_active'] else 'inactive':>8}"
            )

    print()
    print("Recent articles:")
    if not status["recent"]:
        print("  (none)")
    for article in status["recent"]:
        print(
            f"  - {article['title']} [{article['source']} / {article['category']}] "
            f"{article['created_at']:%Y-%m-%d %H:%M}"
        )


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Show news aggregation status and statistics")
    parser.add_argument("--hours", type=int, default=24, help="Window for recent activity in hours")
    parser.add_argument("--detailed", action="store_true", help="Show the per-source breakdown")
    args = parser.parse_args(argv)

    setup_logging()

    try:
        status = asyncio.run(collect_status(args.hours, args.detailed))
    except DatabaseError as e:
        logger.error(f"Status report failed: {e}")
        sys.exit(1)

    print_status(status)
    sys.exit(0)


if __name__ == "__main__":
    main()
