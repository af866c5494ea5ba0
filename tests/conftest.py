"""
Shared pytest fixtures for the Sentences API tests.

Every test gets a fresh in-memory SQLite database.
"""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sentence_api.app import app
from sentence_api.database import Author, Base, Sentence, Tag, get_db, register_listeners


TEST_DATABASE_URL = "sqlite:///:memory:"


class SequenceRandom:
    """Stand-in for random.Random that returns queued values from randint."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        value = self.values.pop(0)
        assert a <= value <= b
        return value


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    engine = register_listeners(create_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    ))
    Base.metadata.create_all(bind=engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def author(db) -> Author:
    author = Author(name="Ada")
    db.add(author)
    db.commit()
    return author


@pytest.fixture
def tags(db) -> list[Tag]:
    tags = [Tag(name="poetry"), Tag(name="humor"), Tag(name="science")]
    db.add_all(tags)
    db.commit()
    return tags


@pytest.fixture
def sentence(db, author) -> Sentence:
    sentence = Sentence(user_id=author.id, content="The quick brown fox.", positive_votes=3)
    db.add(sentence)
    db.commit()
    return sentence


@pytest.fixture
def client(session_factory) -> Iterator[TestClient]:
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
