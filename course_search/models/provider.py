from sqlalchemy import Column, Integer, String, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base
from .enums import ProviderType


class Provider(Base):
    __tablename__ = "provider"
    __table_args__ = (
        UniqueConstraint("recruitment_cycle_id", "provider_code"),
    )

    id = Column(Integer, primary_key=True)
    recruitment_cycle_id = Column(Integer, ForeignKey("recruitment_cycle.id"), nullable=False)
    provider_code = Column(String, nullable=False)
    provider_name = Column(String, nullable=False)
    provider_type = Column(String, nullable=False, default=ProviderType.SCHOOL.value)

    # Geocoded address, absent until geocoding has run
    latitude = Column(Float)
    longitude = Column(Float)

    recruitment_cycle = relationship("RecruitmentCycle", back_populates="providers")
    courses = relationship("Course", back_populates="provider")
    sites = relationship("Site", back_populates="provider")

    def __repr__(self):
        return f"<Provider {self.provider_name} ({self.provider_code})>"
