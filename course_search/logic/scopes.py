"""
Base course collections a search can start from.

Each scope is a plain ``select(Course)`` narrowed with subqueries rather than
joins, so it never adds rows of its own and the pipeline can join freely on
top of it.
"""

from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.sql import Select

from ..models import Course, Provider, RecruitmentCycle, SiteStatus
from .geo import findable_criteria


def all_courses() -> Select:
    return select(Course)


def _provider_ids(year: Optional[int] = None, provider_code: Optional[str] = None):
    query = select(Provider.id)
    if year is not None:
        query = query.join(
            RecruitmentCycle, RecruitmentCycle.id == Provider.recruitment_cycle_id
        ).where(RecruitmentCycle.year == year)
    if provider_code is not None:
        query = query.where(Provider.provider_code == provider_code)
    return query.correlate(None)


def courses_in_cycle(year: int, scope: Optional[Select] = None) -> Select:
    """Courses whose provider belongs to the ``year`` recruitment cycle."""
    scope = scope if scope is not None else all_courses()
    return scope.where(Course.provider_id.in_(_provider_ids(year=year)))


def provider_courses(provider_code: str, year: Optional[int] = None) -> Select:
    """Courses delivered by one provider, optionally within a cycle."""
    return all_courses().where(
        Course.provider_id.in_(_provider_ids(year=year, provider_code=provider_code))
    )


def findable_courses(scope: Optional[Select] = None) -> Select:
    """Courses with at least one running, published site."""
    scope = scope if scope is not None else all_courses()
    return scope.where(
        exists().where(SiteStatus.course_id == Course.id).where(findable_criteria(SiteStatus))
    )
