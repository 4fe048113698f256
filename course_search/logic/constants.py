"""
Course Search Constants

Lookup tables and fixed values used by the filter and ranking pipeline.
Every table here is read-only; the composer takes them as arguments so
callers can swap in their own.
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping

from ..models.enums import ProgramType, StudyMode, FundingType, VacancyStatus


# =============================================================================
# RANKING STRATEGIES
# =============================================================================

class SortStrategy(str, Enum):
    """Mutually exclusive result orderings, listed in precedence order."""
    DELIVERING_FIRST = "delivering_first"
    CANONICAL_ASCENDING = "canonical_ascending"
    CANONICAL_DESCENDING = "canonical_descending"
    DISTANCE = "distance"
    NATURAL = "natural"


# =============================================================================
# FUNDING LOOKUP TABLES
# =============================================================================

# funding=salary
SALARIED_PROGRAM_TYPES: FrozenSet[str] = frozenset({
    ProgramType.SCHOOL_DIRECT_SALARIED.value,
    ProgramType.TEACHING_APPRENTICESHIP.value,
})

# funding_type=salary,apprenticeship,fee
FUNDING_TYPE_PROGRAM_TYPES: Mapping[str, FrozenSet[str]] = MappingProxyType({
    FundingType.SALARY.value: frozenset({
        ProgramType.SCHOOL_DIRECT_SALARIED.value,
    }),
    FundingType.APPRENTICESHIP.value: frozenset({
        ProgramType.TEACHING_APPRENTICESHIP.value,
    }),
    FundingType.FEE.value: frozenset({
        ProgramType.HIGHER_EDUCATION.value,
        ProgramType.SCITT.value,
        ProgramType.SCHOOL_DIRECT.value,
    }),
})

# =============================================================================
# STUDY MODE / VACANCY TABLES
# =============================================================================

# Always matched by a study_type filter, whatever modes were requested
ANY_STUDY_MODE = StudyMode.FULL_TIME_OR_PART_TIME.value

# Vacancy statuses that count as "has vacancies" for a course's study mode
VACANCY_STATUSES_BY_STUDY_MODE: Mapping[str, FrozenSet[str]] = MappingProxyType({
    StudyMode.FULL_TIME.value: frozenset({
        VacancyStatus.FULL_TIME.value,
        VacancyStatus.BOTH.value,
    }),
    StudyMode.PART_TIME.value: frozenset({
        VacancyStatus.PART_TIME.value,
        VacancyStatus.BOTH.value,
    }),
    StudyMode.FULL_TIME_OR_PART_TIME.value: frozenset({
        VacancyStatus.FULL_TIME.value,
        VacancyStatus.PART_TIME.value,
        VacancyStatus.BOTH.value,
    }),
})

# =============================================================================
# SORT KEYS
# =============================================================================

PROVIDER_NAME_SORT_KEY = "provider.provider_name"

CANONICAL_ASCENDING_SORT_KEYS: FrozenSet[str] = frozenset({"name", "provider.provider_name"})
CANONICAL_DESCENDING_SORT_KEYS: FrozenSet[str] = frozenset({"-name", "-provider.provider_name"})
DISTANCE_SORT_KEYS: FrozenSet[str] = frozenset({"distance"})

# =============================================================================
# GEOSPATIAL
# =============================================================================

EARTH_RADIUS_KM = 6371.0

# Distance bonus applied to university-run courses when ranking by distance
UNIVERSITY_LOCATION_BONUS_KM = 10
