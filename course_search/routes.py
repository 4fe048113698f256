"""
Course Search API Routes

Read-only endpoints over the course search pipeline. Query parameters follow
the public API shape: ``filter[<facet>]=...``, ``sort=a,b`` and
``page[page]`` / ``page[per_page]``.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from db import get_db
from .logic.contracts import InvalidCriteriaError, RankedCourse
from .logic.scopes import all_courses, courses_in_cycle, provider_courses
from .logic.search import CourseSearchService


logger = logging.getLogger(__name__)

router = APIRouter(tags=["courses"])

FILTER_PARAM = re.compile(r"filter\[(?P<facet>[^\]]+)\]")

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def _filter_params(request: Request) -> Dict[str, str]:
    """Collect ``filter[facet]=value`` query parameters into a flat mapping."""
    params = {}
    for key, value in request.query_params.multi_items():
        match = FILTER_PARAM.fullmatch(key)
        if match:
            params[match.group("facet")] = value
    return params


def current_cycle_year() -> Optional[int]:
    year = os.getenv("CURRENT_RECRUITMENT_CYCLE_YEAR")
    if not year:
        return None
    try:
        return int(year)
    except ValueError:
        raise RuntimeError(f"CURRENT_RECRUITMENT_CYCLE_YEAR must be a year, got {year!r}")


def _page_links(request: Request, page: int, per_page: int, count: int) -> Dict[str, Any]:
    last_page = max(1, -(-count // per_page))

    def link(number):
        return str(request.url.include_query_params(**{"page[page]": number, "page[per_page]": per_page}))

    return {
        "self": link(page),
        "first": link(1),
        "last": link(last_page),
        "prev": link(page - 1) if page > 1 else None,
        "next": link(page + 1) if page < last_page else None,
    }


def _serialize_course(ranked: RankedCourse) -> Dict[str, Any]:
    course = ranked.course
    provider = course.provider
    data = {
        "id": course.id,
        "course_code": course.course_code,
        "name": course.name,
        "provider_code": provider.provider_code,
        "provider_name": provider.provider_name,
        "accredited_body_code": course.accredited_body_code,
        "is_self_accredited": course.is_self_accredited,
        "program_type": course.program_type,
        "funding_type": course.funding_type,
        "qualification": course.qualification,
        "study_mode": course.study_mode,
        "level": course.level,
        "is_send": course.is_send,
    }
    if ranked.distance is not None:
        data["distance"] = round(ranked.distance, 2)
    if ranked.boosted_distance is not None:
        data["boosted_distance"] = round(ranked.boosted_distance, 2)
    return data


def _run_search(request, db_session, course_scope, sort, page, per_page):
    db: Session
    with db_session as db:
        try:
            result = CourseSearchService.call(
                filter_params=_filter_params(request),
                sort=sort,
                course_scope=course_scope,
            )
        except InvalidCriteriaError as e:
            raise HTTPException(status_code=400, detail=str(e))

        count = result.count(db)
        rows = result.page(db, offset=(page - 1) * per_page, limit=per_page)
        logger.info(f"Course search returned {len(rows)} of {count} courses (page {page})")

        return {
            "data": [_serialize_course(row) for row in rows],
            "meta": {"count": count, "sort_strategy": result.strategy.value},
            "links": _page_links(request, page, per_page, count),
        }


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/courses", summary="Search courses")
def search_courses(
    request: Request,
    sort: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1, alias="page[page]"),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, alias="page[per_page]"),
    db_session=Depends(get_db),
):
    """
    Search all courses, scoped to the current recruitment cycle when one is
    configured.
    """
    year = current_cycle_year()
    scope = courses_in_cycle(year) if year is not None else all_courses()
    return _run_search(request, db_session, scope, sort, page, per_page)


@router.get("/recruitment_cycles/{year}/courses", summary="Search courses in a recruitment cycle")
def search_cycle_courses(
    year: int,
    request: Request,
    sort: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1, alias="page[page]"),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, alias="page[per_page]"),
    db_session=Depends(get_db),
):
    return _run_search(request, db_session, courses_in_cycle(year), sort, page, per_page)


@router.get(
    "/recruitment_cycles/{year}/providers/{provider_code}/courses",
    summary="Search one provider's courses",
)
def search_provider_courses(
    year: int,
    provider_code: str,
    request: Request,
    sort: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1, alias="page[page]"),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, alias="page[per_page]"),
    db_session=Depends(get_db),
):
    scope = provider_courses(provider_code, year=year)
    return _run_search(request, db_session, scope, sort, page, per_page)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/courses/health", summary="Course search health check")
def health_check():
    return {"status": "ok", "service": "course_search"}
