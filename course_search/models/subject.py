from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class Subject(Base):
    __tablename__ = "subject"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)
    subject_code = Column(String)
    subject_name = Column(String)


class CourseSubject(Base):
    __tablename__ = "course_subject"

    id = Column(Integer, primary_key=True)
    course_id = Column(Integer, ForeignKey("course.id"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subject.id"), nullable=False)
    position = Column(Integer)

    course = relationship("Course", back_populates="course_subjects")
    subject = relationship("Subject")
