"""
Course Search Pipeline

Single entry point that combines the search components:
1. Facet Filter Composer - narrow the base scope by the requested facets
2. Deduplication Guard - collapse join fan-out to one row per course
3. Sort/Rank Engine - apply exactly one deterministic ordering

The result is a lazy handle around the composed query. Nothing touches the
database until a caller hands it a session, so a pagination layer can apply
offset/limit without re-running any of the above.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from ..models import Course
from .constants import SortStrategy
from .contracts import FilterCriteria, RankedCourse, SortCriteria
from .dedup import deduplicate
from .filters import DEFAULT_LOOKUP_TABLES, LookupTables, compose_filters
from .ordering import order, resolve_strategy

logger = logging.getLogger(__name__)


class CourseSearchResult:
    """
    Ordered, deduplicated course query.

    Rows come back as RankedCourse, carrying any ranking columns the chosen
    ordering added (provider name, distance, boosted distance).
    """

    def __init__(self, statement: Select, strategy: SortStrategy):
        self.statement = statement
        self.strategy = strategy

    def __repr__(self):
        return f"<CourseSearchResult strategy={self.strategy.value}>"

    def count(self, db: Session) -> int:
        counted = self.statement.order_by(None).subquery()
        return db.scalar(select(func.count()).select_from(counted))

    def page(self, db: Session, offset: int = 0, limit: Optional[int] = None) -> List[RankedCourse]:
        statement = self.statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        return [self._to_ranked(row) for row in db.execute(statement)]

    def all(self, db: Session) -> List[RankedCourse]:
        return self.page(db)

    def courses(self, db: Session) -> List[Course]:
        return [ranked.course for ranked in self.all(db)]

    @staticmethod
    def _to_ranked(row) -> RankedCourse:
        mapping = row._mapping
        return RankedCourse(
            course=row[0],
            provider_name=mapping.get("provider_name"),
            distance=mapping.get("distance"),
            boosted_distance=mapping.get("boosted_distance"),
        )


def search(
    criteria: FilterCriteria,
    sort: SortCriteria,
    scope: Optional[Select] = None,
    tables: LookupTables = DEFAULT_LOOKUP_TABLES,
) -> CourseSearchResult:
    """
    Filter, deduplicate and order courses.

    Args:
        criteria: Parsed filter criteria
        sort: Parsed sort keys
        scope: Base course query (default: all courses)
        tables: Lookup tables for the facet filters

    Returns:
        CourseSearchResult wrapping the composed query
    """
    filtered = compose_filters(criteria, scope, tables)
    deduplicated = deduplicate(filtered, criteria, sort)
    strategy = resolve_strategy(criteria, sort)
    ordered = order(deduplicated, criteria, sort, strategy)

    logger.info(f"🔎 Course search composed: strategy={strategy.value}")
    return CourseSearchResult(ordered, strategy)


class CourseSearchService:
    """
    Runs a search from raw request parameters.

    ``filter_params`` is a flat mapping of facet name to string (or list of
    strings); ``sort`` is a comma-separated list of sort keys. Invalid values
    raise InvalidCriteriaError.
    """

    def __init__(
        self,
        filter_params: Optional[Mapping[str, Any]] = None,
        sort: Optional[str] = None,
        course_scope: Optional[Select] = None,
    ):
        self.filter_params = filter_params or {}
        self.sort = sort
        self.course_scope = course_scope

    @classmethod
    def call(cls, **kwargs) -> CourseSearchResult:
        return cls(**kwargs).execute()

    def execute(self) -> CourseSearchResult:
        criteria = FilterCriteria.from_params(self.filter_params)
        sort = SortCriteria.parse(self.sort)
        return search(criteria, sort, self.course_scope)
