"""
Database models and session management for the Sentences API.

Uses SQLAlchemy with SQLite for the standalone service.
Can be configured for PostgreSQL in production.
"""

import logging
from datetime import datetime, UTC
from typing import List

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean,
    ForeignKey, Table, UniqueConstraint, create_engine, event
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import (
    DeclarativeBase, relationship, sessionmaker, Mapped, mapped_column
)

from sentence_api.config import get_settings


logger = logging.getLogger(__name__)


# =============================================================================
# Database Setup
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def register_listeners(engine: Engine) -> Engine:
    """Attach connection and statement listeners to an engine."""
    settings = get_settings()

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    if settings.log_sql:
        @event.listens_for(engine, "before_cursor_execute")
        def _log_statement(conn, cursor, statement, parameters, context, executemany):
            logger.debug("%s %r", statement, parameters)

    return engine


def get_engine():
    """Create database engine."""
    settings = get_settings()
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
        echo=settings.debug
    )
    return register_listeners(engine)


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


# =============================================================================
# Database Models
# =============================================================================


# Edge table between sentences and tags; the composite key keeps edges unique
sentence_tag = Table(
    "sentence_tag",
    Base.metadata,
    Column(
        "sentence_id", Integer,
        ForeignKey("sentences.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "tag_id", Integer,
        ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Author(Base):
    """A user who submits sentences."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )


class Tag(Base):
    """A label that can be attached to any number of sentences."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )


class Sentence(Base):
    """
    A short text item submitted by an author.

    Vote counters are denormalized here and only ever changed by the
    vote ledger; the author reference never changes after creation.
    """

    __tablename__ = "sentences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("authors.id"), index=True, nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Vote counts (denormalized for performance)
    positive_votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    negative_votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    # Relationships
    author: Mapped["Author"] = relationship("Author")
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary=sentence_tag, order_by="Tag.id"
    )


class VoteLog(Base):
    """
    Audit entry for a single vote.

    Rows are only ever appended. A client may vote on a sentence once.
    """

    __tablename__ = "vote_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    sentence_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sentences.id", ondelete="CASCADE"), index=True
    )
    client_ip: Mapped[str] = mapped_column(String(45), nullable=False)
    positive: Mapped[bool] = mapped_column(Boolean, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('sentence_id', 'client_ip', name='uq_vote_sentence_client'),
    )
