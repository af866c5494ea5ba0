"""
One-vote-per-client voting backed by an append-only vote log.
"""

from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sentence_api.database import Sentence, VoteLog
from sentence_api.errors import DuplicateVoteError, NotFoundError


VOTE_UNIQUE_CONSTRAINT = "uq_vote_sentence_client"


@dataclass(frozen=True)
class VoteCounts:
    """Vote counters of a sentence after a vote."""

    positive_votes: int
    negative_votes: int


def is_duplicate_vote(exc: IntegrityError) -> bool:
    """Whether an integrity error is the (sentence_id, client_ip) uniqueness violation."""
    message = str(exc.orig)
    # PostgreSQL and MySQL name the constraint, SQLite lists the columns
    return (
        VOTE_UNIQUE_CONSTRAINT in message
        or "vote_logs.sentence_id, vote_logs.client_ip" in message
    )


class VoteLedger:
    """
    Record votes on sentences.

    A client is identified by a string such as its network address. The
    log is checked before anything is written, and the unique constraint
    on (sentence_id, client_ip) catches two requests from the same client
    that pass the check at the same time.
    """

    def __init__(self, db: Session):
        self.db = db

    def has_voted(self, sentence_id: int, client_ip: str) -> bool:
        count = self.db.query(VoteLog).filter(
            VoteLog.sentence_id == sentence_id,
            VoteLog.client_ip == client_ip
        ).count()
        return bool(count)

    def record_vote(self, sentence_id: int, client_ip: str, positive: bool) -> VoteCounts:
        """
        Count one vote from a client and log it.

        Raises:
            DuplicateVoteError: if the client already voted on the sentence
            NotFoundError: if the sentence does not exist
        """
        if self.has_voted(sentence_id, client_ip):
            raise DuplicateVoteError("Client already has voted")

        exists = self.db.query(Sentence.id).filter(Sentence.id == sentence_id).scalar()
        if exists is None:
            raise NotFoundError(f"Sentence {sentence_id} not found")

        column = Sentence.positive_votes if positive else Sentence.negative_votes
        result = self.db.execute(
            update(Sentence)
            .where(Sentence.id == sentence_id)
            .values({column: column + 1})
        )
        if result.rowcount == 0:
            # Deleted after the existence check
            self.db.rollback()
            raise NotFoundError(f"Sentence {sentence_id} not found")

        self.db.add(VoteLog(sentence_id=sentence_id, client_ip=client_ip, positive=positive))

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_duplicate_vote(e):
                raise DuplicateVoteError("Client already has voted") from e
            raise

        row = self.db.query(Sentence.positive_votes, Sentence.negative_votes).filter(
            Sentence.id == sentence_id
        ).one()
        return VoteCounts(positive_votes=int(row.positive_votes), negative_votes=int(row.negative_votes))
