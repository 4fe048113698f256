import math

import pytest

from course_search.logic.constants import EARTH_RADIUS_KM, SortStrategy
from course_search.logic.contracts import FilterCriteria, SortCriteria
from course_search.logic.ordering import resolve_strategy
from course_search.logic.search import search
from course_search.models.enums import ProviderType


def ordered(db, params=None, sort=None):
    return search(FilterCriteria.from_params(params), SortCriteria.parse(sort)).courses(db)


def lat_for_km(km):
    return math.degrees(km / EARTH_RADIUS_KM)


# =============================================================================
# STRATEGY SELECTION
# =============================================================================

@pytest.mark.parametrize(
    "params, sort, expected",
    [
        ({"provider.provider_name": "Acme"}, None, SortStrategy.DELIVERING_FIRST),
        ({"provider.provider_name": "Acme"}, "distance", SortStrategy.DELIVERING_FIRST),
        ({}, "name,provider.provider_name", SortStrategy.CANONICAL_ASCENDING),
        ({}, "provider.provider_name,name", SortStrategy.CANONICAL_ASCENDING),
        ({}, "-provider.provider_name,-name", SortStrategy.CANONICAL_DESCENDING),
        ({"latitude": "1", "longitude": "2"}, "distance", SortStrategy.DISTANCE),
        ({}, "distance", SortStrategy.NATURAL),
        ({}, "name", SortStrategy.NATURAL),
        ({}, "name,-provider.provider_name", SortStrategy.NATURAL),
        ({"latitude": "1", "longitude": "2"}, "distance,name", SortStrategy.NATURAL),
        ({}, None, SortStrategy.NATURAL),
    ],
)
def test_resolve_strategy(params, sort, expected):
    criteria = FilterCriteria.from_params(params)

    assert resolve_strategy(criteria, SortCriteria.parse(sort)) is expected


# =============================================================================
# DELIVERING PROVIDER FIRST
# =============================================================================

def test_delivered_courses_before_accredited(db, build):
    acme = build.provider("Acme")
    other = build.provider("Other")
    accredited = build.course(provider=other, course_code="A001", accrediting_provider=acme)
    delivered = build.course(provider=acme, course_code="Z999")

    assert ordered(db, {"provider.provider_name": "Acme"}) == [delivered, accredited]


def test_delivered_first_even_when_accrediting_group_sorts_earlier(db, build):
    provider = build.provider("Zed")
    earlier = build.provider("Able")
    accredited_one = build.course(provider=earlier, course_code="G100", accrediting_provider=provider)
    accredited_two = build.course(provider=earlier, course_code="A100", accrediting_provider=provider)
    delivered = build.course(provider=provider, course_code="Z100")

    assert ordered(db, {"provider.provider_name": "Zed"}) == [delivered, accredited_two, accredited_one]


def test_delivered_group_ordered_canonically(db, build):
    aaa = build.provider("AAA")
    bbb = build.provider("BBB")
    second = build.course(provider=aaa, course_code="Z123")
    first = build.course(provider=aaa, course_code="G123")
    build.course(provider=bbb, course_code="A123")

    assert ordered(db, {"provider.provider_name": "AAA"}) == [first, second]


# =============================================================================
# CANONICAL ORDER
# =============================================================================

@pytest.fixture
def canonical_courses(build):
    provider_a = build.provider("ProviderA")
    provider_b = build.provider("ProviderB")
    return {
        "b_x123": build.course(provider=provider_b, course_code="X123", name="A-course"),
        "a_y999": build.course(provider=provider_a, course_code="Y999", name="Z-course"),
        "a_c100": build.course(provider=provider_a, course_code="C100", name="M-course"),
    }


def test_canonical_ascending_uses_provider_name_then_course_code(db, canonical_courses):
    courses = canonical_courses

    assert ordered(db, sort="name,provider.provider_name") == [
        courses["a_c100"],
        courses["a_y999"],
        courses["b_x123"],
    ]


def test_canonical_descending(db, canonical_courses):
    courses = canonical_courses

    assert ordered(db, sort="-name,-provider.provider_name") == [
        courses["b_x123"],
        courses["a_y999"],
        courses["a_c100"],
    ]


def test_canonical_ascending_with_fanned_out_filter(db, build):
    provider_a = build.provider("ProviderA")
    provider_b = build.provider("ProviderB")
    subjects = [build.subject("C1"), build.subject("F1")]
    b_course = build.add_subjects(build.course(provider=provider_b, course_code="X123"), *subjects)
    a_course = build.add_subjects(build.course(provider=provider_a, course_code="Y999"), *subjects)

    assert ordered(db, {"subjects": "C1,F1"}, "name,provider.provider_name") == [a_course, b_course]


def test_results_carry_provider_name(db, canonical_courses):
    result = search(FilterCriteria(), SortCriteria.parse("name,provider.provider_name"))

    assert [row.provider_name for row in result.all(db)] == ["ProviderA", "ProviderA", "ProviderB"]


# =============================================================================
# DISTANCE
# =============================================================================

# Origin and sites around Liverpool
ORIGIN = {"latitude": "53.384589", "longitude": "-2.941050"}
CLOSEST = {"latitude": 53.380147, "longitude": -2.894760}
MIDDLE = {"latitude": 53.420033, "longitude": -2.939805}
FURTHEST = {"latitude": 53.457170, "longitude": -2.993871}


@pytest.fixture
def distance_courses(build):
    closest = build.course(provider=build.provider())
    middle = build.course(provider=build.provider(provider_type=ProviderType.UNIVERSITY))
    furthest = build.course(provider=build.provider())
    build.site_status(middle, **MIDDLE)
    build.site_status(furthest, **FURTHEST)
    build.site_status(closest, **CLOSEST)
    return closest, middle, furthest


def test_orders_by_distance(db, distance_courses):
    closest, middle, furthest = distance_courses

    params = dict(ORIGIN, expand_university="false")

    assert ordered(db, params, "distance") == [closest, middle, furthest]


def test_orders_by_distance_boosting_universities(db, distance_courses):
    closest, middle, furthest = distance_courses

    params = dict(ORIGIN, expand_university="true")

    assert ordered(db, params, "distance") == [middle, closest, furthest]


def test_boosted_university_ranks_ahead_of_nearer_school(db, build):
    university_course = build.course(provider=build.provider(provider_type=ProviderType.UNIVERSITY))
    school_course = build.course(provider=build.provider(provider_type=ProviderType.SCHOOL))
    build.site_status(university_course, latitude=lat_for_km(5.2), longitude=0.0)
    build.site_status(school_course, latitude=lat_for_km(4.0), longitude=0.0)
    params = {"latitude": "0", "longitude": "0", "expand_university": "true"}

    rows = search(FilterCriteria.from_params(params), SortCriteria.parse("distance")).all(db)

    assert [row.course for row in rows] == [university_course, school_course]
    assert rows[0].distance == pytest.approx(5.2)
    assert rows[0].boosted_distance == pytest.approx(-4.8)
    assert rows[1].boosted_distance == pytest.approx(4.0)


def test_distance_uses_closest_eligible_site(db, build):
    two_sites = build.course()
    build.site_status(two_sites, latitude=lat_for_km(9), longitude=0.0)
    build.site_status(two_sites, latitude=lat_for_km(2), longitude=0.0)
    one_site = build.course()
    build.site_status(one_site, latitude=lat_for_km(3), longitude=0.0)

    rows = search(
        FilterCriteria.from_params({"latitude": "0", "longitude": "0"}),
        SortCriteria.parse("distance"),
    ).all(db)

    assert [row.course for row in rows] == [two_sites, one_site]
    assert rows[0].distance == pytest.approx(2.0)
    assert rows[0].boosted_distance is None


def test_courses_without_eligible_site_are_excluded(db, build):
    located = build.course()
    build.site_status(located, latitude=lat_for_km(1), longitude=0.0)
    build.site_status(build.course())
    build.course()

    params = {"latitude": "0", "longitude": "0"}

    assert ordered(db, params, "distance") == [located]


def test_distance_ties_break_on_provider_name_then_code(db, build):
    provider_b = build.provider("BBB")
    provider_a = build.provider("AAA")
    b_course = build.course(provider=provider_b, course_code="A1")
    a_second = build.course(provider=provider_a, course_code="Z1")
    a_first = build.course(provider=provider_a, course_code="B1")
    for course in (b_course, a_second, a_first):
        build.site_status(course, latitude=lat_for_km(1), longitude=0.0)

    params = {"latitude": "0", "longitude": "0"}

    assert ordered(db, params, "distance") == [a_first, a_second, b_course]


def test_distance_without_origin_is_unordered(db, build):
    course = build.course()
    build.site_status(course, latitude=lat_for_km(1), longitude=0.0)
    unlocated = build.course()

    result = search(FilterCriteria(), SortCriteria.parse("distance"))

    assert result.strategy is SortStrategy.NATURAL
    assert set(result.courses(db)) == {course, unlocated}


def test_unknown_sort_keeps_natural_order(db, build):
    courses = [build.course() for _ in range(3)]

    result = search(FilterCriteria(), SortCriteria.parse("name"))

    assert result.strategy is SortStrategy.NATURAL
    assert set(result.courses(db)) == set(courses)
