from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base
from .enums import SiteStatusStatus, PublishStatus, VacancyStatus


class SiteStatus(Base):
    """Links a course to one of its provider's sites."""
    __tablename__ = "site_status"

    id = Column(Integer, primary_key=True)
    course_id = Column(Integer, ForeignKey("course.id"), nullable=False)
    site_id = Column(Integer, ForeignKey("site.id"), nullable=False)
    status = Column(String, nullable=False, default=SiteStatusStatus.NEW.value)
    publish = Column(String, nullable=False, default=PublishStatus.UNPUBLISHED.value)
    vac_status = Column(String, nullable=False, default=VacancyStatus.NONE.value)

    course = relationship("Course", back_populates="site_statuses")
    site = relationship("Site", back_populates="site_statuses")

    @property
    def is_findable(self) -> bool:
        return (
            self.status == SiteStatusStatus.RUNNING.value
            and self.publish == PublishStatus.PUBLISHED.value
        )
