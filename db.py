# db.py
"""
Database engine and session management.
Uses DATABASE_URL env var. Falls back to SQLite for local dev.
Reports only ever read through these sessions; the settings CLI is the
single writer.
"""

import os
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///data/insights.db",
)

engine = create_engine(
    DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(bind=engine)


class Base(DeclarativeBase):
    pass


def _ensure_sqlite_dir(bind):
    url = bind.url
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        folder = os.path.dirname(url.database)
        if folder:
            os.makedirs(folder, exist_ok=True)


def init_db(bind=None):
    # Import models so SQLAlchemy registers tables
    import models  # noqa: F401

    bind = bind or engine
    _ensure_sqlite_dir(bind)
    Base.metadata.create_all(bind=bind)
    logger.info("Insight tables ensured on %s", bind.url.get_backend_name())
