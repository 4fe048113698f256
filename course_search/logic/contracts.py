"""
Data Contracts for the Course Search Pipeline

Defines Pydantic models for the search input (FilterCriteria, SortCriteria)
and the ranked rows handed back to the pagination layer. Request parameters
arrive as strings or string lists; parsing and validation happen here so the
pipeline only ever sees typed, immutable criteria.
"""

from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import PROVIDER_NAME_SORT_KEY


class InvalidCriteriaError(ValueError):
    """Raised when request parameters cannot be turned into search criteria."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in errors
        )
        super().__init__(f"Invalid search criteria: {messages}")

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidCriteriaError":
        return cls(exc.errors(include_url=False))


def _split_list(value) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(item).strip() for item in value if item is not None and str(item).strip())


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class FilterCriteria(BaseModel):
    """
    Facets requested by a searcher.

    Empty or missing values mean "facet not applied". Flags are only on when
    given the string "true" (any case).
    """
    funding: Optional[str] = None
    qualification: Tuple[str, ...] = ()
    has_vacancies: bool = False
    study_type: Tuple[str, ...] = ()
    subjects: Tuple[str, ...] = ()
    provider_name: Optional[str] = Field(default=None, alias="provider.provider_name")
    send_courses: bool = False
    funding_type: Tuple[str, ...] = ()

    # Search origin and radius in kilometres
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    radius: Optional[float] = Field(default=None, gt=0.0)

    # Boost university-run courses when ordering by distance
    expand_university: bool = False

    class Config:
        frozen = True
        populate_by_name = True
        use_enum_values = True

    @field_validator("qualification", "study_type", "subjects", "funding_type", mode="before")
    @classmethod
    def _comma_separated(cls, value):
        return _split_list(value)

    @field_validator("has_vacancies", "send_courses", "expand_university", mode="before")
    @classmethod
    def _true_flag(cls, value):
        if value is None:
            return False
        return str(value).strip().lower() == "true"

    @field_validator("funding", "provider_name", "latitude", "longitude", "radius", mode="before")
    @classmethod
    def _blank_is_absent(cls, value):
        return None if _is_blank(value) else value

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "FilterCriteria":
        """Build criteria from a flat request-parameter mapping."""
        try:
            return cls.model_validate(dict(params or {}))
        except ValidationError as exc:
            raise InvalidCriteriaError.from_validation_error(exc) from exc

    @property
    def origin(self) -> Optional[Tuple[float, float]]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)

    @property
    def has_location(self) -> bool:
        return self.origin is not None and self.radius is not None

    @property
    def is_provider_name_scoped(self) -> bool:
        return self.provider_name is not None


class SortCriteria(BaseModel):
    """
    Unordered set of sort tokens, e.g. ``name,provider.provider_name``.

    Only exact combinations select an ordering, so the tokens are kept as a
    frozenset and compared by equality.
    """
    keys: FrozenSet[str] = frozenset()

    class Config:
        frozen = True

    @field_validator("keys", mode="before")
    @classmethod
    def _comma_separated(cls, value):
        return frozenset(_split_list(value))

    @classmethod
    def parse(cls, sort) -> "SortCriteria":
        try:
            return cls(keys=sort)
        except ValidationError as exc:
            raise InvalidCriteriaError.from_validation_error(exc) from exc

    @property
    def includes_provider_name(self) -> bool:
        return PROVIDER_NAME_SORT_KEY in self.keys


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class RankedCourse(BaseModel):
    """
    One row of an ordered search result.

    ``distance`` is the closest eligible site in kilometres and is only set
    for distance ordering; ``boosted_distance`` only when universities were
    boosted.
    """
    course: Any
    provider_name: Optional[str] = None
    distance: Optional[float] = None
    boosted_distance: Optional[float] = None

    class Config:
        frozen = True
