# Export all course search models for easy imports
from .base import Base
from .recruitment_cycle import RecruitmentCycle
from .provider import Provider
from .site import Site
from .site_status import SiteStatus
from .subject import Subject, CourseSubject
from .course import Course

__all__ = [
    "Base",
    "RecruitmentCycle",
    "Provider",
    "Site",
    "SiteStatus",
    "Subject",
    "CourseSubject",
    "Course",
]
