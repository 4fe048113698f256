import os
import math
import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from dotenv import load_dotenv
from contextlib import contextmanager

load_dotenv()


class Base(DeclarativeBase):
    pass


SessionLocal = sessionmaker(autoflush=False, autocommit=False, future=True)


def create_db_engine(database_url=None):
    url = database_url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL env var not set")
    echo = os.getenv("SQL_ECHO", "false").lower() == "true"
    return create_engine(url, future=True, pool_pre_ping=True, echo=echo)


def init_db(engine):
    """Bind the session factory to ``engine`` and create any missing tables."""
    SessionLocal.configure(bind=engine)
    Base.metadata.create_all(bind=engine)


def _null_safe(fn):
    def wrapper(*args):
        if any(arg is None for arg in args):
            return None
        return fn(*args)
    return wrapper


def _asin(value):
    # rounding can push the haversine term a hair past 1.0
    return math.asin(min(1.0, max(-1.0, value)))


@event.listens_for(Engine, "connect")
def _register_sqlite_math(dbapi_connection, connection_record):
    # PostgreSQL ships these; SQLite only has them in some builds
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    for name, fn in (
        ("radians", math.radians),
        ("sin", math.sin),
        ("cos", math.cos),
        ("asin", _asin),
        ("sqrt", math.sqrt),
    ):
        dbapi_connection.create_function(name, 1, _null_safe(fn), deterministic=True)


@contextmanager
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
