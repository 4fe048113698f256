"""
Geospatial Distance Evaluator

Great-circle (haversine) distances in kilometres, both as plain Python and
as SQL expressions, plus the university boost used for distance ranking.

A site only counts for distance purposes when its site status is running and
published, it has been geocoded, and it has a locatable address. A course's
distance is that of its closest such site.
"""

import math
from typing import Tuple

from sqlalchemy import and_, case, func, literal, or_, select
from sqlalchemy.orm import aliased

from ..models import Site, SiteStatus
from ..models.enums import ProviderType, PublishStatus, SiteStatusStatus
from .constants import EARTH_RADIUS_KM, UNIVERSITY_LOCATION_BONUS_KM


Origin = Tuple[float, float]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in kilometres between two (latitude, longitude) points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def distance_expression(origin: Origin, latitude_column, longitude_column):
    """SQL expression for the haversine distance from ``origin`` in km."""
    origin_lat, origin_lng = (literal(float(value)) for value in origin)

    half_d_lat = func.sin(func.radians(latitude_column - origin_lat) / 2.0)
    half_d_lng = func.sin(func.radians(longitude_column - origin_lng) / 2.0)
    a = (
        half_d_lat * half_d_lat
        + func.cos(func.radians(origin_lat))
        * func.cos(func.radians(latitude_column))
        * half_d_lng * half_d_lng
    )
    # rounding can push sqrt(a) a hair past 1.0, outside asin's domain
    root = func.sqrt(a)
    return 2.0 * EARTH_RADIUS_KM * func.asin(case((root > 1.0, 1.0), else_=root))


def boosted_distance_expression(
    distance_column,
    provider_type_column,
    bonus: float = UNIVERSITY_LOCATION_BONUS_KM,
):
    """
    Ranking distance for a course, with universities treated as ``bonus`` km
    closer. The result is not clamped at zero; it is only ever compared, never
    displayed.
    """
    return case(
        (provider_type_column == ProviderType.UNIVERSITY.value, distance_column - bonus),
        else_=distance_column,
    )


def findable_criteria(site_status):
    return and_(
        site_status.status == SiteStatusStatus.RUNNING.value,
        site_status.publish == PublishStatus.PUBLISHED.value,
    )


def locatable_site_criteria(site, site_status):
    """Sites eligible to provide a course's distance."""
    return and_(
        findable_criteria(site_status),
        site.latitude.isnot(None),
        site.longitude.isnot(None),
        or_(
            and_(site.address1.isnot(None), site.address1 != ""),
            and_(site.postcode.isnot(None), site.postcode != ""),
        ),
    )


def closest_site_distances(origin: Origin):
    """
    Subquery of ``(course_id, distance)``, one row per course with at least
    one eligible site, where distance is to the closest of them.
    """
    site = aliased(Site)
    site_status = aliased(SiteStatus)
    distance = distance_expression(origin, site.latitude, site.longitude)

    return (
        select(
            site_status.course_id.label("course_id"),
            func.min(distance).label("distance"),
        )
        .join(site, site.id == site_status.site_id)
        .where(locatable_site_criteria(site, site_status))
        .group_by(site_status.course_id)
        .subquery("distances")
    )
