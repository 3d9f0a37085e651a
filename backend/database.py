# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy declarative base, engine / session-factory construction, the
startup connection bootstrap, and the FastAPI dependency that provides a
DB session per request.

Nothing here is created at import time: ``create_app`` builds the engine
from its Settings and parks the session factory on ``app.state``.
"""

import time

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from core.logger import get_logger

log = get_logger("database")

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    # pool_pre_ping keeps idle connections alive across MySQL's wait_timeout
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def ping(engine: Engine) -> bool:
    """Round-trip a trivial statement; False if the database is unreachable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except OperationalError as exc:
        log.warning("Database ping failed: %s", exc)
        return False


def wait_for_database(
    engine: Engine,
    retries: int = 5,
    delay: float = 5.0,
    backoff: float = 1.5,
    sleep=time.sleep,
) -> None:
    """
    Block until the database answers, retrying with exponential backoff.

    One initial attempt plus up to *retries* more; the pause before retry n
    is ``delay * backoff ** (n - 1)``.  Raises ``RuntimeError`` when every
    attempt has failed so the process never starts serving without a store.
    """
    wait = delay
    for attempt in range(retries + 1):
        if ping(engine):
            log.info("Database connected: %s", engine.url.render_as_string(hide_password=True))
            return
        if attempt < retries:
            log.info("Retrying database connection in %.1fs (%d attempts remaining)", wait, retries - attempt)
            sleep(wait)
            wait *= backoff
    raise RuntimeError(f"Failed to connect to the database after {retries + 1} attempts")


def get_db(request: Request):
    """
    FastAPI dependency.  Yields a session for the duration of the request,
    then closes it.  Use with Depends(get_db).
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
