"""
Routes package for the Sentences API.
"""

from sentence_api.routes.sentences import router as sentences_router
from sentence_api.routes.tags import tags_router, authors_router
from sentence_api.routes.health import router as health_router

__all__ = ["sentences_router", "tags_router", "authors_router", "health_router"]
