"""Pipeline services: fetching, cleaning, classifying and storing articles."""

from newsagg.services.aggregation import AggregationService
from newsagg.services.categorizer import DEFAULT_CATEGORY_TABLE, Categorizer, CategoryRule
from newsagg.services.duplicate_detector import DuplicateDetector, title_similarity
from newsagg.services.resilient_fetcher import ResilientFetcher
from newsagg.services.store_writer import StoreReport, StoreWriter

__all__ = [
    "AggregationService",
    "Categorizer",
    "CategoryRule",
    "DEFAULT_CATEGORY_TABLE",
    "DuplicateDetector",
    "ResilientFetcher",
    "StoreReport",
    "StoreWriter",
    "title_similarity",
]
