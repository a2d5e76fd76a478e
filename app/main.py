"""
Placement Portal - Main Application

FastAPI backend with:
- MongoDB for users and companies
- JWT authentication
- Role-gated mutations (verify, role change, placement, delete)

Run: uvicorn app.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("mongodb.index_init_failed", error=str(e))
    yield


# Create FastAPI app
app = FastAPI(
    title="Placement Portal",
    description="""
    Placement management API.

    ## Features
    - **Authentication**: JWT bearer tokens
    - **Users**: listing, profile updates, verification, role changes, placement reassignment
    - **Companies**: offers, compensation and cutoffs

    Mutations are checked against each caller's role capabilities and may
    never target the caller's own role, verification or account.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
