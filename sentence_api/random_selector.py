"""
Random sentence selection without ORDER BY RANDOM().

Instead of shuffling the whole table, guess ids in the range [1, count]
a few times and fall back to the first sentence. Gaps left by deleted rows
make this slightly non-uniform over existing sentences; that is accepted
in exchange for never scanning the table.
"""

import random
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from sentence_api.config import get_settings
from sentence_api.database import Sentence
from sentence_api.errors import NotFoundError


class RandomSelector:
    """Pick one sentence using bounded id guesses."""

    def __init__(
        self,
        db: Session,
        rng: Optional[random.Random] = None,
        max_attempts: Optional[int] = None
    ):
        self.db = db
        self.rng = rng or random.Random()
        if max_attempts is None:
            max_attempts = get_settings().random_max_attempts
        self.max_attempts = max_attempts

    def select_random(self) -> Sentence:
        """
        Return a pseudo-random sentence.

        Raises:
            NotFoundError: if there are no sentences at all
        """
        total = self.db.query(func.count(Sentence.id)).scalar() or 0
        if total == 0:
            raise NotFoundError("No sentences available")

        for _ in range(self.max_attempts):
            sentence_id = self.rng.randint(1, total)
            sentence = _with_relations(self.db.query(Sentence)).filter(
                Sentence.id == sentence_id
            ).first()
            if sentence is not None:
                return sentence

        # Every guess hit a gap
        sentence = _with_relations(self.db.query(Sentence)).order_by(Sentence.id).first()
        if sentence is None:
            raise NotFoundError("No sentences available")
        return sentence


def _with_relations(query):
    return query.options(selectinload(Sentence.author), selectinload(Sentence.tags))
