"""Database-backed store for dedup state."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class StateEntryModel(Base):
    """One key of the persisted state document."""

    __tablename__ = "state_entries"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))


def init_engine(connection_string: Optional[str]) -> Optional[Engine]:
    """Initialize the database engine."""
    if not connection_string:
        return None

    logger.info("Initializing database connection: %s", connection_string)
    engine = create_engine(connection_string)
    Base.metadata.create_all(engine)
    return engine


def get_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory for the given engine."""
    return sessionmaker(bind=engine)


class SqlStateStore:
    """Key-value store with the same contract as the JSON file store."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, connection_string: str) -> "SqlStateStore":
        engine = init_engine(connection_string)
        if engine is None:
            raise ValueError("A database connection string is required.")
        return cls(get_session_factory(engine))

    def read(self, key: Optional[str] = None) -> Any:
        with self.session_factory() as session:
            if key is not None:
                row = session.get(StateEntryModel, key)
                return row.value if row is not None else None

            rows = session.execute(select(StateEntryModel)).scalars().all()
            return {row.key: row.value for row in rows}

    def write(self, data: Dict[str, Any]) -> None:
        if not data:
            return

        with self.session_factory() as session:
            existing = {
                row.key: row
                for row in session.execute(
                    select(StateEntryModel).where(StateEntryModel.key.in_(list(data)))
                ).scalars()
            }

            for key, value in data.items():
                if key in existing:
                    existing[key].value = value
                    existing[key].updated_at = datetime.now(timezone.utc)
                else:
                    session.add(StateEntryModel(key=key, value=value))

            try:
                session.commit()
            except Exception:
                session.rollback()
                raise

        logger.debug("Stored keys %s in database", sorted(data))
