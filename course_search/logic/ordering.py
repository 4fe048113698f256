"""
Sort/Rank Engine

Picks exactly one ordering for a deduplicated course query.

Precedence:
1. Provider name filter present -> courses the provider delivers, then
   courses it only accredits; each group by provider name, course code.
2. Sort keys exactly {name, provider.provider_name} -> provider name,
   course code ascending.
3. Sort keys exactly {-name, -provider.provider_name} -> provider name,
   course code descending.
4. Sort keys exactly {distance} -> closest eligible site first, with
   universities boosted when expand_university is set. Courses without an
   eligible site are dropped.
5. Anything else -> query returned unchanged.

Every ordering selects the columns it orders by, which keeps
``SELECT DISTINCT ... ORDER BY`` valid on PostgreSQL.
"""

import logging
from typing import Callable, Dict, Optional

from sqlalchemy import case
from sqlalchemy.orm import aliased
from sqlalchemy.sql import Select

from ..models import Course, Provider
from .constants import (
    CANONICAL_ASCENDING_SORT_KEYS,
    CANONICAL_DESCENDING_SORT_KEYS,
    DISTANCE_SORT_KEYS,
    SortStrategy,
    UNIVERSITY_LOCATION_BONUS_KM,
)
from .contracts import FilterCriteria, SortCriteria
from .geo import boosted_distance_expression, closest_site_distances

logger = logging.getLogger(__name__)

# Exact sort-key sets and the strategy each selects
SORT_KEY_STRATEGIES = (
    (CANONICAL_ASCENDING_SORT_KEYS, SortStrategy.CANONICAL_ASCENDING),
    (CANONICAL_DESCENDING_SORT_KEYS, SortStrategy.CANONICAL_DESCENDING),
    (DISTANCE_SORT_KEYS, SortStrategy.DISTANCE),
)


def resolve_strategy(criteria: FilterCriteria, sort: SortCriteria) -> SortStrategy:
    if criteria.is_provider_name_scoped:
        return SortStrategy.DELIVERING_FIRST

    for keys, strategy in SORT_KEY_STRATEGIES:
        if sort.keys == keys:
            if strategy is SortStrategy.DISTANCE and criteria.origin is None:
                logger.warning("Distance ordering requested without an origin; leaving results unordered")
                return SortStrategy.NATURAL
            return strategy

    if sort.keys:
        logger.debug(f"No ordering for sort keys {sorted(sort.keys)}")
    return SortStrategy.NATURAL


# =============================================================================
# STRATEGIES
# =============================================================================

def _join_provider(scope: Select):
    provider = aliased(Provider)
    provider_name = provider.provider_name.label("provider_name")
    scope = scope.join(provider, Course.provider_id == provider.id).add_columns(provider_name)
    return scope, provider, provider_name


def order_delivering_first(scope: Select, criteria: FilterCriteria) -> Select:
    scope, provider, provider_name = _join_provider(scope)
    delivered_by_named_provider = case(
        (provider.provider_name == criteria.provider_name, 0),
        else_=1,
    )
    return scope.order_by(
        delivered_by_named_provider,
        provider_name.asc(),
        Course.course_code.asc(),
        Course.id.asc(),
    )


def order_canonically_ascending(scope: Select, criteria: FilterCriteria) -> Select:
    scope, provider, provider_name = _join_provider(scope)
    return scope.order_by(provider_name.asc(), Course.course_code.asc(), Course.id.asc())


def order_canonically_descending(scope: Select, criteria: FilterCriteria) -> Select:
    scope, provider, provider_name = _join_provider(scope)
    return scope.order_by(provider_name.desc(), Course.course_code.desc(), Course.id.desc())


def order_by_distance(
    scope: Select,
    criteria: FilterCriteria,
    bonus: float = UNIVERSITY_LOCATION_BONUS_KM,
) -> Select:
    distances = closest_site_distances(criteria.origin)
    # inner join: no eligible site, no row
    scope = scope.join(distances, distances.c.course_id == Course.id)
    scope, provider, provider_name = _join_provider(scope)

    distance = distances.c.distance.label("distance")
    scope = scope.add_columns(distance)
    ranking = distance

    if criteria.expand_university:
        ranking = boosted_distance_expression(
            distances.c.distance, provider.provider_type, bonus
        ).label("boosted_distance")
        scope = scope.add_columns(ranking)

    return scope.order_by(
        ranking.asc(),
        provider_name.asc(),
        Course.course_code.asc(),
        Course.id.asc(),
    )


def order_naturally(scope: Select, criteria: FilterCriteria) -> Select:
    return scope


STRATEGIES: Dict[SortStrategy, Callable[[Select, FilterCriteria], Select]] = {
    SortStrategy.DELIVERING_FIRST: order_delivering_first,
    SortStrategy.CANONICAL_ASCENDING: order_canonically_ascending,
    SortStrategy.CANONICAL_DESCENDING: order_canonically_descending,
    SortStrategy.DISTANCE: order_by_distance,
    SortStrategy.NATURAL: order_naturally,
}


def order(
    scope: Select,
    criteria: FilterCriteria,
    sort: SortCriteria,
    strategy: Optional[SortStrategy] = None,
) -> Select:
    if strategy is None:
        strategy = resolve_strategy(criteria, sort)
    logger.debug(f"Ordering strategy: {strategy.value}")
    return STRATEGIES[strategy](scope, criteria)
