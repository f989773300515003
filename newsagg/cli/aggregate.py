"""Fetch articles from the news providers.

Usage:
    newsagg-aggregate [--source SOURCE] [--limit N] [--category C] [--query Q]
                      [--from DATE] [--to DATE] [--store] [--timeout S] [--tries N]
"""

import argparse
import asyncio
import sys
from datetime import date
from functools import partial
from typing import Optional

from newsagg.core.config import settings
from newsagg.core.constants import NewsSource
from newsagg.core.exceptions import NewsAggregatorError
from newsagg.jobs.aggregation_job import AggregationJob, run_aggregation
from newsagg.models.domain import AggregationFilters, AggregationRunResult
from newsagg.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

# Number of accepted titles echoed after a run
SAMPLE_TITLES = 5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aggregate news articles from external APIs")
    parser.add_argument(
        "--source",
        choices=[source.value for source in NewsSource],
        help="Only fetch from this source",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.aggregation_default_limit,
        help="Number of articles to fetch per source",
    )
    parser.add_argument("--category", help="Provider category to fetch")
    parser.add_argument("--query", help="Free-text search query")
    parser.add_argument("--from", dest="from_date", type=date.fromisoformat, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="to_date", type=date.fromisoformat, help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--store",
        action="store_true",
        help="Store the accepted articles in the database",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.aggregation_run_timeout,
        help="Wall-clock budget of one run in seconds",
    )
    parser.add_argument(
        "--tries",
        type=int,
        default=1,
        help="Attempts before the run is reported as failed",
    )
    return parser


def filters_from_args(args: argparse.Namespace) -> AggregationFilters:
    return AggregationFilters(
        limit=args.limit,
        category=args.category,
        q=args.query,
        from_date=args.from_date,
        to_date=args.to_date,
    )


def print_summary(result: AggregationRunResult, stored: bool) -> None:
    print(f"Aggregated {result.accepted_count} articles in {result.duration_seconds:.2f}s")
    for source, count in result.source_counts.items():
        print(f"  {source}: {count}")
    for source, error in result.errors.items():
        print(f"  {source}: FAILED ({error})")

    if stored:
        print(
            f"Stored {result.stored_count} articles "
            f"({result.duplicates_rejected} rejected as duplicates)"
        )

    if result.articles:
        print("Sample articles:")
        for article in result.articles[:SAMPLE_TITLES]:
            print(f"  - {article.title}")


async def aggregate(args: argparse.Namespace) -> AggregationRunResult:
    job = AggregationJob(
        filters=filters_from_args(args),
        source_id=args.source,
        timeout=args.timeout,
        tries=args.tries,
        runner=partial(run_aggregation, store_results=args.store),
    )
    return await job.handle()


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        result = asyncio.run(aggregate(args))
    except (NewsAggregatorError, ValueError) as e:
        logger.error(f"Aggregation failed: {e}")
        print(f"Aggregation failed: {e}", file=sys.stderr)
        sys.exit(1)

    print_summary(result, stored=args.store)
    sys.exit(0)


if __name__ == "__main__":
    main()
