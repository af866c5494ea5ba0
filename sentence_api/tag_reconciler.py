"""
Reconciliation of the sentence/tag association.

Operations here work on the edge table directly and never commit; the
caller commits once per request so that adds and removes land together.
"""

from typing import Iterable, Optional, Set

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from sentence_api.database import Sentence, sentence_tag
from sentence_api.errors import NotFoundError


class TagReconciler:
    """Apply minimal attach/detach deltas to a sentence's tags."""

    def __init__(self, db: Session):
        self.db = db

    def current_tag_ids(self, sentence_id: int) -> Set[int]:
        """Tag ids currently attached to a sentence."""
        rows = self.db.execute(
            select(sentence_tag.c.tag_id).where(sentence_tag.c.sentence_id == sentence_id)
        )
        return {row.tag_id for row in rows}

    def reconcile(
        self,
        sentence_id: int,
        add_tags: Iterable[int] = (),
        remove_tags: Iterable[int] = (),
        clear_all: bool = False
    ) -> None:
        """
        Attach and detach tags on a sentence.

        Clearing wins over everything else. Otherwise adds are applied
        first and removals second, so an id present in both sets ends up
        detached. Attaching a present tag or detaching an absent one does
        nothing.

        Raises:
            NotFoundError: if the sentence does not exist
        """
        self._ensure_sentence(sentence_id)

        if clear_all:
            self.detach(sentence_id)
            return

        add_tags = set(add_tags)
        remove_tags = set(remove_tags)

        if add_tags:
            for tag_id in sorted(add_tags - self.current_tag_ids(sentence_id)):
                self.attach(sentence_id, tag_id)

        if remove_tags:
            self.detach(sentence_id, remove_tags)

    def sync(self, sentence_id: int, tag_ids: Iterable[int]) -> None:
        """
        Make the given ids the complete tag set of a sentence.

        Raises:
            NotFoundError: if the sentence does not exist
        """
        self._ensure_sentence(sentence_id)

        desired = set(tag_ids)
        current = self.current_tag_ids(sentence_id)

        stale = current - desired
        if stale:
            self.detach(sentence_id, stale)
        for tag_id in sorted(desired - current):
            self.attach(sentence_id, tag_id)

    def attach(self, sentence_id: int, tag_id: int) -> None:
        self.db.execute(insert(sentence_tag).values(sentence_id=sentence_id, tag_id=tag_id))

    def detach(self, sentence_id: int, tag_ids: Optional[Iterable[int]] = None) -> None:
        """Remove the given edges, or every edge of the sentence when no ids are given."""
        stmt = delete(sentence_tag).where(sentence_tag.c.sentence_id == sentence_id)
        if tag_ids is not None:
            stmt = stmt.where(sentence_tag.c.tag_id.in_(list(tag_ids)))
        self.db.execute(stmt)

    def _ensure_sentence(self, sentence_id: int) -> None:
        exists = self.db.query(Sentence.id).filter(Sentence.id == sentence_id).scalar()
        if exists is None:
            raise NotFoundError(f"Sentence {sentence_id} not found")
