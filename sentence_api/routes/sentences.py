"""
API routes for managing sentences, their tags and votes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from sentence_api.database import get_db
from sentence_api.models import (
    ApiResponse, CreateSentenceRequest, SentenceResponse,
    UpdateSentenceRequest, VoteCountsResponse, VoteRequest
)
from sentence_api.sentence_service import SentenceService

router = APIRouter(prefix="/sentences", tags=["Sentences"])


def get_service(db: Session = Depends(get_db)) -> SentenceService:
    """Dependency to get a sentence service bound to the request session."""
    return SentenceService(db)


# =============================================================================
# Read
# =============================================================================


@router.get("/", response_model=ApiResponse[List[SentenceResponse]])
def list_sentences(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    service: SentenceService = Depends(get_service)
):
    """List sentences ordered by ID, with author and tags."""
    sentences = service.list_sentences(limit=limit, offset=offset)
    return ApiResponse(data=[SentenceResponse.model_validate(s) for s in sentences])


@router.get("/random", response_model=ApiResponse[SentenceResponse])
def random_sentence(service: SentenceService = Depends(get_service)):
    """
    Return a random sentence.

    IDs are guessed within the current row count a few times before
    falling back to the first sentence, so the whole table is never
    shuffled.
    """
    sentence = service.random_sentence()
    return ApiResponse(data=SentenceResponse.model_validate(sentence))


@router.get("/{sentence_id}", response_model=ApiResponse[SentenceResponse])
def get_sentence(sentence_id: int, service: SentenceService = Depends(get_service)):
    """Get a single sentence with its author and tags."""
    sentence = service.get_sentence(sentence_id)
    return ApiResponse(data=SentenceResponse.model_validate(sentence))


# =============================================================================
# Write
# =============================================================================


@router.post("/", response_model=ApiResponse[SentenceResponse], status_code=201)
def create_sentence(
    request: CreateSentenceRequest,
    service: SentenceService = Depends(get_service)
):
    """
    Store a new sentence.

    ``tags`` is the complete tag list of the new sentence.
    """
    sentence = service.create_sentence(
        user_id=request.user_id,
        content=request.content,
        tag_ids=request.tags
    )
    return ApiResponse(data=SentenceResponse.model_validate(sentence))


@router.put("/{sentence_id}", response_model=ApiResponse[SentenceResponse])
def update_sentence(
    sentence_id: int,
    request: UpdateSentenceRequest,
    service: SentenceService = Depends(get_service)
):
    """
    Update a sentence and its tags.

    Tags already on the sentence are not added twice. Removals are
    applied after additions, and ``remove_all_tags`` overrides both.
    """
    sentence = service.update_sentence(
        sentence_id,
        content=request.content,
        add_tags=request.add_tags,
        remove_tags=request.remove_tags,
        remove_all_tags=request.remove_all_tags
    )
    return ApiResponse(data=SentenceResponse.model_validate(sentence))


@router.delete("/{sentence_id}", response_model=ApiResponse)
def delete_sentence(sentence_id: int, service: SentenceService = Depends(get_service)):
    """Delete a sentence."""
    service.delete_sentence(sentence_id)
    return ApiResponse(message="Sentence deleted")


# =============================================================================
# Votes
# =============================================================================


@router.post("/{sentence_id}/vote", response_model=ApiResponse[VoteCountsResponse])
def vote_sentence(
    sentence_id: int,
    vote: VoteRequest,
    request: Request,
    service: SentenceService = Depends(get_service)
):
    """
    Vote a sentence up or down.

    Each client address may vote once per sentence.
    """
    client_ip = request.client.host if request.client else "unknown"
    counts = service.vote_sentence(sentence_id, client_ip, vote.positive)
    return ApiResponse(
        message="Votes updated",
        data=VoteCountsResponse.model_validate(counts)
    )
