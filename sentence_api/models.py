"""
Pydantic models for Sentences API requests and responses.
"""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator


T = TypeVar("T")


# =============================================================================
# Request Models
# =============================================================================


def _unique_ids(v: Optional[List[int]]) -> Optional[List[int]]:
    """Drop repeated ids while keeping order."""
    if v is None:
        return v
    return list(dict.fromkeys(v))


class CreateSentenceRequest(BaseModel):
    """Request to create a new sentence."""

    user_id: int = Field(..., gt=0, description="ID of the author")
    content: str = Field(..., min_length=1, max_length=1000)
    tags: List[int] = Field(..., description="Complete list of tag IDs for the sentence")

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return _unique_ids(v)


class UpdateSentenceRequest(BaseModel):
    """
    Request to update a sentence.

    The author cannot be changed; a ``user_id`` in the body is ignored.
    """

    content: str = Field(..., min_length=1, max_length=1000)
    add_tags: Optional[List[int]] = Field(default=None, description="Tag IDs to attach")
    remove_tags: Optional[List[int]] = Field(default=None, description="Tag IDs to detach")
    remove_all_tags: bool = Field(
        default=False,
        description="Detach every tag; add_tags and remove_tags are ignored"
    )

    @field_validator('add_tags', 'remove_tags')
    @classmethod
    def validate_tag_lists(cls, v):
        return _unique_ids(v)


class VoteRequest(BaseModel):
    """Request to vote a sentence up or down."""

    positive: bool = Field(..., description="True for an up vote, false for a down vote")


class CreateTagRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class CreateAuthorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


# =============================================================================
# Response Models
# =============================================================================


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every response."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class AuthorResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class TagResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class SentenceResponse(BaseModel):
    """Response containing a single sentence with its author and tags."""

    id: int
    user_id: int
    content: str

    positive_votes: int = 0
    negative_votes: int = 0

    author: Optional[AuthorResponse] = None
    tags: List[TagResponse] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VoteCountsResponse(BaseModel):
    positive_votes: int
    negative_votes: int

    class Config:
        from_attributes = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    database_connected: bool
    sentences_count: int = 0
    votes_count: int = 0
