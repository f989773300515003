"""Trigger surface for scheduled and manual aggregation runs."""

from newsagg.jobs.aggregation_job import AggregationJob, run_aggregation

__all__ = ["AggregationJob", "run_aggregation"]
