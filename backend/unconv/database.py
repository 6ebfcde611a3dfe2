"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file `app.db` next to the
package by default) and provides the session dependency used by the
request handlers.
"""

from sqlmodel import SQLModel, create_engine, Session

from .config import settings

# signed 64-bit INTEGER range shared by SQLite and PostgreSQL BIGINT
MIN_SQL_INTEGER = -(2 ** 63)
MAX_SQL_INTEGER = 2 ** 63 - 1


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    connect_args=_connect_args(settings.DATABASE_URL),
)


def create_db_and_tables(bind=None):
    """Create database tables using SQLModel metadata.

    Schema management is limited to `create_all`; existing tables are
    left untouched.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
