"""
Domain errors raised by the sentence services.

Routes never build HTTP errors for these themselves; the application maps
each class to a status code in one place.
"""


class SentenceApiError(Exception):
    """Base class for all domain failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SentenceApiError):
    """The referenced record does not exist."""


class DuplicateVoteError(SentenceApiError):
    """The client has already voted on this sentence."""


class ValidationError(SentenceApiError):
    """Input is malformed or references records that do not exist."""
