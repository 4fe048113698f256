from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base
from .enums import FundingType, ProgramType, StudyMode


class Course(Base):
    __tablename__ = "course"
    __table_args__ = (
        # Course codes are only unique within a provider (and so a cycle)
        UniqueConstraint("provider_id", "course_code"),
    )

    id = Column(Integer, primary_key=True)
    provider_id = Column(Integer, ForeignKey("provider.id"), nullable=False)
    course_code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    qualification = Column(String)
    program_type = Column(String)
    study_mode = Column(String, default=StudyMode.FULL_TIME.value)
    level = Column(String)
    is_send = Column(Boolean, nullable=False, default=False)

    # provider_code of the accrediting provider; null when self-accredited
    accredited_body_code = Column(String)

    provider = relationship("Provider", back_populates="courses")
    site_statuses = relationship("SiteStatus", back_populates="course")
    course_subjects = relationship(
        "CourseSubject",
        back_populates="course",
        order_by="CourseSubject.position",
    )
    subjects = relationship(
        "Subject",
        secondary="course_subject",
        order_by="CourseSubject.position",
        viewonly=True,
    )

    @property
    def funding_type(self):
        if self.program_type is None:
            return None
        if self.program_type == ProgramType.SCHOOL_DIRECT_SALARIED.value:
            return FundingType.SALARY.value
        if self.program_type == ProgramType.TEACHING_APPRENTICESHIP.value:
            return FundingType.APPRENTICESHIP.value
        return FundingType.FEE.value

    @property
    def is_self_accredited(self) -> bool:
        return self.accredited_body_code is None

    @property
    def findable_site_statuses(self):
        return [s for s in self.site_statuses if s.is_findable]

    @property
    def is_findable(self) -> bool:
        return bool(self.findable_site_statuses)

    @property
    def has_vacancies(self) -> bool:
        from ..logic.constants import VACANCY_STATUSES_BY_STUDY_MODE

        statuses = VACANCY_STATUSES_BY_STUDY_MODE.get(self.study_mode, frozenset())
        return any(s.vac_status in statuses for s in self.findable_site_statuses)

    def __repr__(self):
        return f"<Course {self.course_code} {self.name!r}>"
