"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.api import auth, bookings, grounds, stats
from groundbook.core.config import settings
from groundbook.core.database import get_db, init_db
from groundbook.core.exceptions import GroundBookError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting GroundBook API")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Strict slot order: {settings.STRICT_SLOT_ORDER}")

    await init_db()

    yield

    # Shutdown
    logger.info("Shutting down GroundBook API")


# Create FastAPI app
app = FastAPI(
    title="GroundBook",
    description="Book sports grounds in consecutive 2-hour slots",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(auth.router)
app.include_router(grounds.router)
app.include_router(bookings.router)
app.include_router(stats.router)


@app.exception_handler(GroundBookError)
async def groundbook_error_handler(request: Request, exc: GroundBookError):
    """Render domain errors that were not handled by a route."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


@app.get("/api/health")
async def health(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        database = "disconnected"

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
    }
