from sqlalchemy import Column, Integer, String, Float, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class Site(Base):
    __tablename__ = "site"

    id = Column(Integer, primary_key=True)
    provider_id = Column(Integer, ForeignKey("provider.id"), nullable=False)
    code = Column(String, nullable=False)
    location_name = Column(String)
    address1 = Column(String, default="")
    address2 = Column(String, default="")
    address3 = Column(String, default="")
    address4 = Column(String, default="")
    postcode = Column(String, default="")
    latitude = Column(Float)
    longitude = Column(Float)

    provider = relationship("Provider", back_populates="sites")
    site_statuses = relationship("SiteStatus", back_populates="site")
