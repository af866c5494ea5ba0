"""
API routes for tags and authors.

Both are plain lookup records that sentences point at.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sentence_api.database import get_db, Author, Tag
from sentence_api.errors import NotFoundError, ValidationError
from sentence_api.models import (
    ApiResponse, AuthorResponse, CreateAuthorRequest, CreateTagRequest, TagResponse
)


tags_router = APIRouter(prefix="/tags", tags=["Tags"])
authors_router = APIRouter(prefix="/authors", tags=["Authors"])


# =============================================================================
# Tags
# =============================================================================


@tags_router.get("/", response_model=ApiResponse[List[TagResponse]])
def list_tags(db: Session = Depends(get_db)):
    """List all tags ordered by name."""
    tags = db.query(Tag).order_by(Tag.name).all()
    return ApiResponse(data=[TagResponse.model_validate(t) for t in tags])


@tags_router.post("/", response_model=ApiResponse[TagResponse], status_code=201)
def create_tag(request: CreateTagRequest, db: Session = Depends(get_db)):
    """Create a tag. Names are unique."""
    existing = db.query(Tag).filter(Tag.name == request.name).first()
    if existing:
        raise ValidationError(f"Tag '{request.name}' already exists")

    tag = Tag(name=request.name)
    db.add(tag)
    try:
        db.commit()
    except IntegrityError as e:
        # Created by a concurrent request since the check above
        db.rollback()
        raise ValidationError(f"Tag '{request.name}' already exists") from e
    db.refresh(tag)

    return ApiResponse(data=TagResponse.model_validate(tag))


# =============================================================================
# Authors
# =============================================================================


@authors_router.get("/", response_model=ApiResponse[List[AuthorResponse]])
def list_authors(db: Session = Depends(get_db)):
    authors = db.query(Author).order_by(Author.id).all()
    return ApiResponse(data=[AuthorResponse.model_validate(a) for a in authors])


@authors_router.get("/{author_id}", response_model=ApiResponse[AuthorResponse])
def get_author(author_id: int, db: Session = Depends(get_db)):
    author = db.query(Author).filter(Author.id == author_id).first()
    if not author:
        raise NotFoundError(f"Author {author_id} not found")
    return ApiResponse(data=AuthorResponse.model_validate(author))


@authors_router.post("/", response_model=ApiResponse[AuthorResponse], status_code=201)
def create_author(request: CreateAuthorRequest, db: Session = Depends(get_db)):
    author = Author(name=request.name)
    db.add(author)
    db.commit()
    db.refresh(author)

    return ApiResponse(data=AuthorResponse.model_validate(author))
