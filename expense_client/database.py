from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from expense_client.config import settings


class Base(DeclarativeBase):
    pass


def create_storage_engine(url: str) -> Engine:
    """Create the engine for client storage, expanding ``~`` in SQLite paths."""
    from expense_client.models import StorageItem  # noqa: F401

    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        path = Path(parsed.database).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        parsed = parsed.set(database=str(path))
    engine = create_engine(parsed, echo=False)
    Base.metadata.create_all(engine)
    return engine


_session_factory: sessionmaker[Session] | None = None


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        engine = create_storage_engine(settings.STORAGE_URL)
        _session_factory = sessionmaker(engine, expire_on_commit=False)
    return _session_factory
