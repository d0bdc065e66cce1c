"""Database engine initialization and connection management."""

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from .schema import Base, ServiceMetadata

SCHEMA_VERSION = "1.0.0"


def init_database(url: str, echo: bool = False) -> sessionmaker[Any]:
    """Initialize database and return session factory.

    Accepts any SQLAlchemy URL. A bare filesystem path is treated as a
    SQLite database file.
    """
    if "://" not in url:
        url = f"sqlite:///{url}"

    parsed = make_url(url)
    connect_args: dict[str, Any] = {}
    if parsed.get_backend_name() == "sqlite":
        # Sessions are opened from FastAPI's threadpool workers
        connect_args["check_same_thread"] = False
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=echo, connect_args=connect_args)
    Base.metadata.create_all(engine)

    session_maker = sessionmaker(bind=engine, expire_on_commit=False)

    with session_maker() as session:
        schema_version = session.get(ServiceMetadata, "schema_version")
        if not schema_version:
            session.add(ServiceMetadata(key="schema_version", value=SCHEMA_VERSION))
            session.commit()

    return session_maker
