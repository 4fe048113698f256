from sqlalchemy import Column, Integer
from sqlalchemy.orm import relationship

from .base import Base


class RecruitmentCycle(Base):
    __tablename__ = "recruitment_cycle"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False, unique=True)

    providers = relationship("Provider", back_populates="recruitment_cycle")

    def __repr__(self):
        return f"<RecruitmentCycle {self.year}>"
