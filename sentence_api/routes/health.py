"""
API route for service health.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sentence_api.config import get_settings
from sentence_api.database import get_db, Sentence, VoteLog
from sentence_api.models import HealthResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

settings = get_settings()


@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns service health status and basic statistics.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return HealthResponse(
            status="degraded",
            version=settings.app_version,
            database_connected=False
        )

    sentences_count = db.query(func.count(Sentence.id)).scalar() or 0
    votes_count = db.query(func.count(VoteLog.id)).scalar() or 0

    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        database_connected=True,
        sentences_count=sentences_count,
        votes_count=votes_count
    )
