"""Stored values for the enumerated columns on course search tables."""

from enum import Enum


class ProgramType(str, Enum):
    """How a course is run and funded."""
    HIGHER_EDUCATION = "higher_education_programme"
    SCHOOL_DIRECT = "school_direct_training_programme"
    SCHOOL_DIRECT_SALARIED = "school_direct_salaried_training_programme"
    SCITT = "scitt_programme"
    TEACHING_APPRENTICESHIP = "pg_teaching_apprenticeship"


class StudyMode(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    FULL_TIME_OR_PART_TIME = "full_time_or_part_time"


class Level(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    FURTHER_EDUCATION = "further_education"


class FundingType(str, Enum):
    """Funding categories a searcher can ask for."""
    SALARY = "salary"
    APPRENTICESHIP = "apprenticeship"
    FEE = "fee"


class ProviderType(str, Enum):
    SCHOOL = "school"
    SCITT = "scitt"
    UNIVERSITY = "university"
    LEAD_SCHOOL = "lead_school"


class SiteStatusStatus(str, Enum):
    NEW = "new_status"
    RUNNING = "running"
    SUSPENDED = "suspended"
    DISCONTINUED = "discontinued"


class PublishStatus(str, Enum):
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"


class VacancyStatus(str, Enum):
    BOTH = "both_full_time_and_part_time_vacancies"
    PART_TIME = "part_time_vacancies"
    FULL_TIME = "full_time_vacancies"
    NONE = "no_vacancies"


class SubjectType(str, Enum):
    PRIMARY = "PrimarySubject"
    SECONDARY = "SecondarySubject"
    FURTHER_EDUCATION = "FurtherEducationSubject"
    MODERN_LANGUAGES = "ModernLanguagesSubject"
    DISCONTINUED = "DiscontinuedSubject"
