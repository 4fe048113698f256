"""
Course Search Logic Module

Filter composition, deduplication and deterministic ranking for teacher
training course search.
"""

from .contracts import (
    FilterCriteria,
    SortCriteria,
    RankedCourse,
    InvalidCriteriaError,
)
from .constants import SortStrategy
from .filters import compose_filters, LookupTables
from .dedup import deduplicate
from .ordering import order, resolve_strategy
from .search import search, CourseSearchResult, CourseSearchService

__all__ = [
    # Pipeline
    "search",
    "CourseSearchResult",
    "CourseSearchService",

    # Components
    "compose_filters",
    "LookupTables",
    "deduplicate",
    "order",
    "resolve_strategy",

    # Contracts
    "FilterCriteria",
    "SortCriteria",
    "RankedCourse",
    "InvalidCriteriaError",

    # Enums
    "SortStrategy",
]
