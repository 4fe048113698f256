"""
Shared fixtures: an in-memory SQLite database per test and a small builder
for providers, courses, sites and subjects.
"""

import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from course_search.models import (
    Course,
    CourseSubject,
    Provider,
    RecruitmentCycle,
    Site,
    SiteStatus,
    Subject,
)
from course_search.models.enums import (
    Level,
    ProgramType,
    ProviderType,
    PublishStatus,
    SiteStatusStatus,
    StudyMode,
    SubjectType,
    VacancyStatus,
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, future=True)()
    try:
        yield session
    finally:
        session.close()


class Builder:
    """Creates persisted test records with sensible defaults."""

    def __init__(self, db):
        self.db = db
        self._sequence = itertools.count(1)
        self._cycles = {}

    def _next(self):
        return next(self._sequence)

    def cycle(self, year=2021):
        if year not in self._cycles:
            cycle = RecruitmentCycle(year=year)
            self.db.add(cycle)
            self.db.flush()
            self._cycles[year] = cycle
        return self._cycles[year]

    def provider(self, provider_name=None, provider_code=None, provider_type=ProviderType.SCHOOL, year=2021):
        n = self._next()
        provider = Provider(
            provider_name=provider_name or f"Provider {n}",
            provider_code=provider_code or f"P{n:02d}",
            provider_type=provider_type.value,
            recruitment_cycle=self.cycle(year),
        )
        self.db.add(provider)
        self.db.flush()
        return provider

    def course(
        self,
        provider=None,
        course_code=None,
        name=None,
        qualification="pgce_with_qts",
        program_type=ProgramType.HIGHER_EDUCATION,
        study_mode=StudyMode.FULL_TIME,
        is_send=False,
        accrediting_provider=None,
        level=Level.SECONDARY,
    ):
        n = self._next()
        course = Course(
            provider=provider or self.provider(),
            course_code=course_code or f"C{n:03d}",
            name=name or f"Course {n}",
            qualification=qualification,
            program_type=program_type.value,
            study_mode=study_mode.value,
            is_send=is_send,
            level=level.value,
            accredited_body_code=accrediting_provider.provider_code if accrediting_provider else None,
        )
        self.db.add(course)
        self.db.flush()
        return course

    def site(self, provider, latitude=None, longitude=None, address1="1 High Street", postcode="AB1 2CD"):
        n = self._next()
        site = Site(
            provider=provider,
            code=f"S{n}",
            location_name=f"Site {n}",
            address1=address1,
            postcode=postcode,
            latitude=latitude,
            longitude=longitude,
        )
        self.db.add(site)
        self.db.flush()
        return site

    def site_status(
        self,
        course,
        site=None,
        status=SiteStatusStatus.RUNNING,
        publish=PublishStatus.PUBLISHED,
        vac_status=VacancyStatus.BOTH,
        **site_attributes,
    ):
        site_status = SiteStatus(
            course=course,
            site=site or self.site(course.provider, **site_attributes),
            status=status.value,
            publish=publish.value,
            vac_status=vac_status.value,
        )
        self.db.add(site_status)
        self.db.flush()
        return site_status

    def subject(self, subject_code, subject_name=None, type=SubjectType.SECONDARY):
        subject = Subject(subject_code=subject_code, subject_name=subject_name or subject_code, type=type.value)
        self.db.add(subject)
        self.db.flush()
        return subject

    def add_subjects(self, course, *subjects):
        for position, subject in enumerate(subjects):
            self.db.add(CourseSubject(course=course, subject=subject, position=position))
        self.db.flush()
        return course


@pytest.fixture
def build(db):
    return Builder(db)
