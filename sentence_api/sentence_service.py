"""
Sentence operations used by the HTTP routes.

Each public method runs inside one request session and commits at most
once, so a failure part way through leaves the store untouched.
"""

import logging
import random
from typing import Iterable, List, Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session, selectinload

from sentence_api.config import get_settings
from sentence_api.database import Author, Sentence, Tag, VoteLog
from sentence_api.errors import NotFoundError, ValidationError
from sentence_api.random_selector import RandomSelector
from sentence_api.tag_reconciler import TagReconciler
from sentence_api.vote_ledger import VoteCounts, VoteLedger


logger = logging.getLogger(__name__)


class SentenceService:
    """Create, update, fetch, vote on and delete sentences."""

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        self.db = db
        self.settings = get_settings()
        self.tags = TagReconciler(db)
        self.votes = VoteLedger(db)
        self.selector = RandomSelector(db, rng=rng)

    def get_sentence(self, sentence_id: int) -> Sentence:
        """Fetch a sentence with its author and tags loaded."""
        sentence = self.db.query(Sentence).options(
            selectinload(Sentence.author), selectinload(Sentence.tags)
        ).filter(Sentence.id == sentence_id).first()
        if sentence is None:
            raise NotFoundError(f"Sentence {sentence_id} not found")
        return sentence

    def list_sentences(self, limit: Optional[int] = None, offset: int = 0) -> List[Sentence]:
        limit = min(limit or self.settings.default_page_size, self.settings.max_page_size)
        return self.db.query(Sentence).options(
            selectinload(Sentence.author), selectinload(Sentence.tags)
        ).order_by(Sentence.id).offset(offset).limit(limit).all()

    def create_sentence(self, user_id: int, content: str, tag_ids: Iterable[int]) -> Sentence:
        """
        Store a new sentence and give it exactly the given tags.

        Raises:
            ValidationError: if the author or any tag does not exist
        """
        tag_ids = list(tag_ids)
        if self.db.get(Author, user_id) is None:
            raise ValidationError(f"Author {user_id} does not exist")
        self._ensure_tags_exist(tag_ids)

        sentence = Sentence(user_id=user_id, content=content)
        self.db.add(sentence)
        self.db.flush()

        self.tags.sync(sentence.id, tag_ids)
        self.db.commit()

        logger.info(f"Created sentence {sentence.id} with {len(tag_ids)} tags")
        return self.get_sentence(sentence.id)

    def update_sentence(
        self,
        sentence_id: int,
        content: str,
        add_tags: Optional[Iterable[int]] = None,
        remove_tags: Optional[Iterable[int]] = None,
        remove_all_tags: bool = False
    ) -> Sentence:
        """
        Overwrite a sentence's content and adjust its tags.

        The author is never changed.

        Raises:
            NotFoundError: if the sentence does not exist
            ValidationError: if a tag to add does not exist
        """
        sentence = self.db.get(Sentence, sentence_id)
        if sentence is None:
            raise NotFoundError(f"Sentence {sentence_id} not found")

        add_tags = list(add_tags or [])
        remove_tags = list(remove_tags or [])
        if not remove_all_tags:
            self._ensure_tags_exist(add_tags)

        sentence.content = content
        self.db.flush()

        self.tags.reconcile(
            sentence_id,
            add_tags=add_tags,
            remove_tags=remove_tags,
            clear_all=remove_all_tags
        )
        self.db.commit()

        logger.info(f"Updated sentence {sentence_id}")
        return self.get_sentence(sentence_id)

    def vote_sentence(self, sentence_id: int, client_ip: str, positive: bool) -> VoteCounts:
        """Record a vote; see VoteLedger.record_vote."""
        counts = self.votes.record_vote(sentence_id, client_ip, positive)
        logger.info(
            f"Vote on sentence {sentence_id} ({'positive' if positive else 'negative'}): "
            f"{counts.positive_votes}+ / {counts.negative_votes}-"
        )
        return counts

    def random_sentence(self) -> Sentence:
        return self.selector.select_random()

    def delete_sentence(self, sentence_id: int) -> None:
        """Delete a sentence together with its tag edges and vote log."""
        sentence = self.db.get(Sentence, sentence_id)
        if sentence is None:
            raise NotFoundError(f"Sentence {sentence_id} not found")

        self.db.execute(delete(VoteLog).where(VoteLog.sentence_id == sentence_id))
        self.db.delete(sentence)
        self.db.commit()

        logger.info(f"Deleted sentence {sentence_id}")

    def _ensure_tags_exist(self, tag_ids: List[int]) -> None:
        if not tag_ids:
            return
        found = {row.id for row in self.db.query(Tag.id).filter(Tag.id.in_(tag_ids)).all()}
        missing = sorted(set(tag_ids) - found)
        if missing:
            raise ValidationError(f"Unknown tag IDs: {missing}")
