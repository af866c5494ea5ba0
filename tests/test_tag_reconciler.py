"""Tests for tag association reconciliation."""

import pytest

from sentence_api.errors import NotFoundError
from sentence_api.tag_reconciler import TagReconciler


@pytest.fixture
def reconciler(db):
    return TagReconciler(db)


def test_add_is_idempotent(db, reconciler, sentence, tags):
    poetry = tags[0].id

    reconciler.reconcile(sentence.id, add_tags={poetry})
    db.commit()
    reconciler.reconcile(sentence.id, add_tags={poetry})
    db.commit()

    assert reconciler.current_tag_ids(sentence.id) == {poetry}


def test_add_skips_existing_and_attaches_new(db, reconciler, sentence, tags):
    poetry, humor, science = (t.id for t in tags)
    reconciler.sync(sentence.id, [poetry])

    reconciler.reconcile(sentence.id, add_tags=[poetry, humor, science])
    db.commit()

    assert reconciler.current_tag_ids(sentence.id) == {poetry, humor, science}


def test_clear_all_takes_precedence(db, reconciler, sentence, tags):
    poetry, humor, science = (t.id for t in tags)
    reconciler.sync(sentence.id, [poetry, humor])

    reconciler.reconcile(sentence.id, add_tags={science}, remove_tags={poetry}, clear_all=True)
    db.commit()

    assert reconciler.current_tag_ids(sentence.id) == set()


def test_removal_wins_over_addition(db, reconciler, sentence, tags):
    humor = tags[1].id

    reconciler.reconcile(sentence.id, add_tags={humor}, remove_tags={humor})
    db.commit()

    assert humor not in reconciler.current_tag_ids(sentence.id)


def test_detaching_absent_tag_is_a_no_op(db, reconciler, sentence, tags):
    poetry, humor, _ = (t.id for t in tags)
    reconciler.sync(sentence.id, [poetry])

    reconciler.reconcile(sentence.id, remove_tags={humor})
    db.commit()

    assert reconciler.current_tag_ids(sentence.id) == {poetry}


def test_empty_deltas_change_nothing(db, reconciler, sentence, tags):
    reconciler.sync(sentence.id, [tags[0].id])

    reconciler.reconcile(sentence.id)

    assert reconciler.current_tag_ids(sentence.id) == {tags[0].id}


def test_sync_replaces_whole_set(db, reconciler, sentence, tags):
    poetry, humor, science = (t.id for t in tags)
    reconciler.sync(sentence.id, [poetry, humor])

    reconciler.sync(sentence.id, [humor, science])
    db.commit()

    assert reconciler.current_tag_ids(sentence.id) == {humor, science}


def test_sync_with_empty_set_clears(db, reconciler, sentence, tags):
    reconciler.sync(sentence.id, [t.id for t in tags])

    reconciler.sync(sentence.id, [])

    assert reconciler.current_tag_ids(sentence.id) == set()


def test_unknown_sentence_raises_not_found(reconciler, tags):
    with pytest.raises(NotFoundError):
        reconciler.reconcile(999, add_tags={tags[0].id})

    with pytest.raises(NotFoundError):
        reconciler.sync(999, [tags[0].id])


def test_changes_roll_back_together(db, reconciler, sentence, tags):
    poetry, humor, _ = (t.id for t in tags)
    reconciler.sync(sentence.id, [poetry])
    db.commit()

    reconciler.reconcile(sentence.id, add_tags={humor}, remove_tags={poetry})
    db.rollback()

    assert reconciler.current_tag_ids(sentence.id) == {poetry}
