"""Transaction utilities for explicit transaction boundaries."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session, sessionmaker


@contextmanager
def transaction(session: Session) -> Generator[Session]:
    """Context manager for explicit transaction boundaries.

    Commits on successful completion, rolls back on any exception.

    Example:
        with transaction(session):
            ride_repo.transition(ride_id, RideAction.ASSIGN, driver_id=7)
        # Automatic commit if no exception, rollback otherwise
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


@contextmanager
def unit_of_work(session_factory: sessionmaker[Any]) -> Generator[Session]:
    """Open a session, run the block in a transaction, and close the session."""
    with session_factory() as session, transaction(session):
        yield session
