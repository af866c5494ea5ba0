"""Tests for the sentence service operations."""

import pytest
from sqlalchemy import func, select

from sentence_api.database import Sentence, VoteLog, sentence_tag
from sentence_api.errors import NotFoundError, ValidationError
from sentence_api.sentence_service import SentenceService
from tests.conftest import SequenceRandom


@pytest.fixture
def service(db):
    return SentenceService(db)


def tag_names(sentence):
    return [t.name for t in sentence.tags]


def test_create_syncs_given_tags(service, author, tags):
    sentence = service.create_sentence(author.id, "Hello there.", [tags[0].id, tags[2].id])

    assert sentence.id is not None
    assert sentence.author.name == "Ada"
    assert tag_names(sentence) == ["poetry", "science"]
    assert (sentence.positive_votes, sentence.negative_votes) == (0, 0)


def test_create_with_unknown_author_is_rejected(db, service, tags):
    with pytest.raises(ValidationError):
        service.create_sentence(42, "Orphan.", [])

    assert db.scalar(select(func.count(Sentence.id))) == 0


def test_create_with_unknown_tag_is_rejected(db, service, author, tags):
    with pytest.raises(ValidationError, match="Unknown tag IDs"):
        service.create_sentence(author.id, "Hello.", [tags[0].id, 999])

    assert db.scalar(select(func.count(Sentence.id))) == 0


def test_update_overwrites_content_and_applies_deltas(service, author, tags):
    poetry, humor, science = (t.id for t in tags)
    created = service.create_sentence(author.id, "Before.", [poetry, humor])

    updated = service.update_sentence(
        created.id, "After.", add_tags=[poetry, science], remove_tags=[humor]
    )

    assert updated.content == "After."
    assert updated.user_id == author.id
    assert tag_names(updated) == ["poetry", "science"]


def test_update_remove_all_tags_wins(service, author, tags):
    created = service.create_sentence(author.id, "Tagged.", [tags[0].id])

    updated = service.update_sentence(
        created.id, "Bare.", add_tags=[tags[1].id], remove_all_tags=True
    )

    assert updated.tags == []


def test_update_with_unknown_tag_leaves_sentence_untouched(db, service, author, tags):
    created = service.create_sentence(author.id, "Keep me.", [tags[0].id])

    with pytest.raises(ValidationError):
        service.update_sentence(created.id, "Changed.", add_tags=[999])

    db.expire_all()
    assert service.get_sentence(created.id).content == "Keep me."


def test_update_unknown_sentence_raises_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_sentence(999, "Nope.")


def test_get_unknown_sentence_raises_not_found(service):
    with pytest.raises(NotFoundError):
        service.get_sentence(999)


def test_list_is_ordered_and_paginated(service, author):
    for i in range(5):
        service.create_sentence(author.id, f"Sentence {i}", [])

    page = service.list_sentences(limit=2, offset=1)

    assert [s.content for s in page] == ["Sentence 1", "Sentence 2"]


def test_list_limit_is_capped(service, author):
    service.create_sentence(author.id, "Only one.", [])

    assert len(service.list_sentences(limit=10_000)) == 1


def test_vote_and_random_delegate(db, author):
    service = SentenceService(db, rng=SequenceRandom([1]))
    created = service.create_sentence(author.id, "Vote me.", [])

    counts = service.vote_sentence(created.id, "127.0.0.1", True)

    assert counts.positive_votes == 1
    assert service.random_sentence().id == created.id


def test_delete_removes_edges_and_votes(db, service, author, tags):
    created = service.create_sentence(author.id, "Short lived.", [t.id for t in tags])
    service.vote_sentence(created.id, "127.0.0.1", False)

    service.delete_sentence(created.id)

    assert db.scalar(select(func.count(Sentence.id))) == 0
    assert db.scalar(select(func.count()).select_from(sentence_tag)) == 0
    assert db.scalar(select(func.count(VoteLog.id))) == 0


def test_delete_unknown_sentence_raises_not_found(service):
    with pytest.raises(NotFoundError):
        service.delete_sentence(999)
