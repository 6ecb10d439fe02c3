"""Blocking database access for the Celery housekeeping tasks.

The API runs on the asyncpg engine in ``showcase.database``; workers use a
psycopg2 engine against the same database.
"""
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session

from showcase.config import get_settings

_sync_engine: Optional[Engine] = None
_engine_lock = threading.Lock()


def sync_database_url(async_url: str) -> str:
    """Swap the async driver of a database URL for psycopg2.

    ``postgresql+asyncpg://u:p@db/showcase`` -> ``postgresql+psycopg2://u:p@db/showcase``
    """
    url = make_url(async_url)
    if url.get_backend_name() == "postgresql":
        url = url.set(drivername="postgresql+psycopg2")
    return url.render_as_string(hide_password=False)


def _get_sync_engine() -> Engine:
    global _sync_engine
    if _sync_engine is None:
        with _engine_lock:
            if _sync_engine is None:
                _sync_engine = create_engine(
                    sync_database_url(get_settings().DATABASE_URL),
                    pool_pre_ping=True,
                )
    return _sync_engine


@contextmanager
def sync_db_session() -> Iterator[Session]:
    """Session for one task run; the caller commits.

        with sync_db_session() as db:
            document = db.get(Document, document_id)
            document.status = "expired"
            db.commit()
    """
    with Session(_get_sync_engine()) as session:
        yield session
