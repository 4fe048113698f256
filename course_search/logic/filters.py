"""
Facet Filter Composer

Narrows a course query by the facets present in a FilterCriteria.

Facets are kept in an ordered registry; each entry knows when it is active
and how to narrow a ``Select``. Active facets are applied in turn, so they
combine with AND. Inactive facets leave the query untouched.

Facets that join to sites or subjects use their own aliases and may return
more than one row per course. Collapsing those rows is the deduplication
guard's job, not this module's.
"""

import logging
from typing import Callable, FrozenSet, Mapping, NamedTuple, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import aliased
from sqlalchemy.sql import Select

from ..models import Course, CourseSubject, Provider, Site, SiteStatus, Subject
from .constants import (
    ANY_STUDY_MODE,
    FUNDING_TYPE_PROGRAM_TYPES,
    SALARIED_PROGRAM_TYPES,
    VACANCY_STATUSES_BY_STUDY_MODE,
)
from .contracts import FilterCriteria
from .geo import distance_expression, findable_criteria, locatable_site_criteria
from .scopes import all_courses

logger = logging.getLogger(__name__)


class LookupTables(NamedTuple):
    """Program-type and vacancy mappings the facets consult."""
    salaried_program_types: FrozenSet[str] = SALARIED_PROGRAM_TYPES
    funding_type_program_types: Mapping[str, FrozenSet[str]] = FUNDING_TYPE_PROGRAM_TYPES
    vacancy_statuses_by_study_mode: Mapping[str, FrozenSet[str]] = VACANCY_STATUSES_BY_STUDY_MODE


DEFAULT_LOOKUP_TABLES = LookupTables()


class Facet(NamedTuple):
    name: str
    is_active: Callable[[FilterCriteria], bool]
    apply: Callable[[Select, FilterCriteria, LookupTables], Select]


# =============================================================================
# FACET BUILDERS
# =============================================================================

def with_salary(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    return scope.where(Course.program_type.in_(sorted(tables.salaried_program_types)))


def with_qualifications(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    return scope.where(Course.qualification.in_(criteria.qualification))


def with_vacancies(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    """Courses with a findable site reporting vacancies for the course's study mode."""
    site_status = aliased(SiteStatus)
    vacancy_for_study_mode = or_(*[
        and_(
            Course.study_mode == study_mode,
            site_status.vac_status.in_(sorted(statuses)),
        )
        for study_mode, statuses in sorted(tables.vacancy_statuses_by_study_mode.items())
    ])
    return (
        scope.join(site_status, site_status.course_id == Course.id)
        .where(findable_criteria(site_status))
        .where(vacancy_for_study_mode)
    )


def with_study_modes(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    # A course offering both modes satisfies any single-mode request
    study_modes = set(criteria.study_type) | {ANY_STUDY_MODE}
    return scope.where(Course.study_mode.in_(sorted(study_modes)))


def with_subjects(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    course_subject = aliased(CourseSubject)
    subject = aliased(Subject)
    return (
        scope.join(course_subject, course_subject.course_id == Course.id)
        .join(subject, subject.id == course_subject.subject_id)
        .where(subject.subject_code.in_(criteria.subjects))
    )


def with_provider_name(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    """Courses the named provider delivers or accredits."""
    named_provider = aliased(Provider)
    delivering_ids = (
        select(named_provider.id)
        .where(named_provider.provider_name == criteria.provider_name)
        .correlate(None)
    )
    accrediting_codes = (
        select(named_provider.provider_code)
        .where(named_provider.provider_name == criteria.provider_name)
        .correlate(None)
    )
    return scope.where(
        or_(
            Course.provider_id.in_(delivering_ids),
            Course.accredited_body_code.in_(accrediting_codes),
        )
    )


def with_send(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    return scope.where(Course.is_send.is_(True))


def with_funding_types(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    program_types = set()
    for funding_type in criteria.funding_type:
        if funding_type not in tables.funding_type_program_types:
            logger.debug(f"Ignoring unknown funding type: {funding_type}")
            continue
        program_types |= tables.funding_type_program_types[funding_type]
    return scope.where(Course.program_type.in_(sorted(program_types)))


def within(scope: Select, criteria: FilterCriteria, tables: LookupTables) -> Select:
    """Courses with an eligible site strictly inside the radius of the origin."""
    site_status = aliased(SiteStatus)
    site = aliased(Site)
    distance = distance_expression(criteria.origin, site.latitude, site.longitude)
    return (
        scope.join(site_status, site_status.course_id == Course.id)
        .join(site, site.id == site_status.site_id)
        .where(locatable_site_criteria(site, site_status))
        .where(distance < criteria.radius)
    )


FACETS = (
    Facet("funding", lambda c: c.funding == "salary", with_salary),
    Facet("qualification", lambda c: bool(c.qualification), with_qualifications),
    Facet("has_vacancies", lambda c: c.has_vacancies, with_vacancies),
    Facet("study_type", lambda c: bool(c.study_type), with_study_modes),
    Facet("subjects", lambda c: bool(c.subjects), with_subjects),
    Facet("provider.provider_name", lambda c: c.is_provider_name_scoped, with_provider_name),
    Facet("send_courses", lambda c: c.send_courses, with_send),
    Facet("location", lambda c: c.has_location, within),
    Facet("funding_type", lambda c: bool(c.funding_type), with_funding_types),
)


# =============================================================================
# COMPOSER
# =============================================================================

def active_facets(criteria: FilterCriteria, facets=FACETS):
    return [facet for facet in facets if facet.is_active(criteria)]


def compose_filters(
    criteria: FilterCriteria,
    scope: Optional[Select] = None,
    tables: LookupTables = DEFAULT_LOOKUP_TABLES,
    facets=FACETS,
) -> Select:
    """
    Apply every active facet in ``criteria`` to ``scope``.

    Args:
        criteria: Parsed filter criteria
        scope: Base course query (default: all courses)
        tables: Program-type and vacancy lookup tables
        facets: Facet registry, in application order

    Returns:
        The narrowed query. Rows are not yet deduplicated.
    """
    if scope is None:
        scope = all_courses()

    for facet in active_facets(criteria, facets):
        logger.debug(f"Applying facet filter: {facet.name}")
        scope = facet.apply(scope, criteria, tables)

    return scope
