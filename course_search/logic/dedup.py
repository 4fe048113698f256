"""
Deduplication Guard

Facet joins can return a course once per matching site or subject. Before
ordering, the query is collapsed back to one row per course, by one of two
paths:

- provider-name scoped (a provider name filter, or ``provider.provider_name``
  among the sort keys): select courses whose id is in the filtered query.
  Later joins to the delivering and accrediting provider add rows that a
  trailing DISTINCT cannot collapse cleanly, so the ids are fixed up front.
- otherwise: DISTINCT over the filtered query.
"""

import logging

from sqlalchemy import select
from sqlalchemy.sql import Select

from ..models import Course
from .contracts import FilterCriteria, SortCriteria

logger = logging.getLogger(__name__)


def is_provider_name_scoped(criteria: FilterCriteria, sort: SortCriteria) -> bool:
    # Filter and sort are independent triggers
    return criteria.is_provider_name_scoped or sort.includes_provider_name


def distinct_course_ids(scope: Select) -> Select:
    return select(Course).where(
        Course.id.in_(scope.with_only_columns(Course.id).correlate(None))
    )


def deduplicate(scope: Select, criteria: FilterCriteria, sort: SortCriteria) -> Select:
    if is_provider_name_scoped(criteria, sort):
        logger.debug("Deduplicating by distinct course ids")
        return distinct_course_ids(scope)

    logger.debug("Deduplicating with DISTINCT")
    return scope.distinct()
