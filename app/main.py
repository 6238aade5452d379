"""
Todo Service application.

Wires the /api/todos router together with logging, CORS and rate
limiting, and turns StorageError into a 500 response. The health
endpoints live here as well.

Run with:
    uvicorn app.main:app --reload
"""

import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import endpoints
from app.core.exceptions import StorageError
from app.core.rate_limit import limiter
from app.core.setting import settings
from app.db.session import get_session, init_db
from app.middleware.logging import add_logging_middleware, configure_logging

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(
    title="Todo Service",
    description="Manage time-bound todos: CRUD, mark as done, and incoming-todo windows",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI documentation
    redoc_url="/redoc",  # ReDoc documentation
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """
    Report a storage failure as 500.

    The original driver error is logged, not sent to the client.
    """
    logger.error(
        f"{request.method} {request.url.path} failed: {exc}",
        exc_info=exc.original_error or exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint.

    Returns:
        Simple JSON response indicating service is running
    """
    return {
        "message": "Todo Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check endpoint for monitoring.

    Runs a trivial query so a dead database shows up as 503.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy"},
        )
    return {"status": "healthy"}


app.include_router(endpoints.router, tags=["Todos"])


@app.on_event("startup")
async def startup_event():
    """Create missing tables when enabled."""
    if settings.AUTO_CREATE_TABLES:
        await init_db()
