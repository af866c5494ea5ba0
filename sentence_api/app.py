"""
Sentences API Service - FastAPI Application.

JSON API for sentences, their tags and per-client votes.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sentence_api.config import get_settings
from sentence_api.database import init_db
from sentence_api.errors import (
    DuplicateVoteError, NotFoundError, SentenceApiError, ValidationError
)
from sentence_api.routes import (
    sentences_router, tags_router, authors_router, health_router
)


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


ERROR_STATUS = {
    NotFoundError: 404,
    DuplicateVoteError: 409,
    ValidationError: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Sentences API Service...")
    init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down Sentences API Service...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## Sentences API

Manage short user-submitted sentences.

### Key Concepts

- **Sentences**: Short text items owned by an author
- **Tags**: Labels attached to sentences; updates add and remove only
  what changed
- **Votes**: Each client may vote a sentence up or down once
- **Random**: A random sentence is picked by guessing IDs, never by
  shuffling the whole table

Every response is wrapped as `{"success": ..., "message": ..., "data": ...}`.
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
origins = settings.allowed_origins.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Handlers
# =============================================================================


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "data": None},
    )


@app.exception_handler(SentenceApiError)
async def handle_domain_error(request: Request, exc: SentenceApiError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    if isinstance(exc, DuplicateVoteError):
        logger.warning(f"Rejected duplicate vote: {request.method} {request.url.path}")
    return error_response(status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return error_response(422, details or "Invalid request")


# Include routers
app.include_router(sentences_router, prefix="/api")
app.include_router(tags_router, prefix="/api")
app.include_router(authors_router, prefix="/api")
app.include_router(health_router, prefix="/api")


# Root endpoint
@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs_url": "/docs",
        "openapi_url": "/openapi.json",
        "endpoints": {
            "sentences": "/api/sentences",
            "random": "/api/sentences/random",
            "tags": "/api/tags",
            "authors": "/api/authors",
            "health": "/api/health",
        }
    }


# Health check at root level too
@app.get("/health")
def root_health():
    """Quick health check."""
    return {"status": "ok", "version": settings.app_version}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sentence_api.app:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.debug
    )
