import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

import sys
import os

sys.path.append(os.path.dirname(__file__))

from app.core.config import settings
from app.core.notifications import MatchNotifier
from app.core.queues import create_notification_queue, create_redis_connection, test_redis_connection
from app.api import api_router
from app.api.errors import register_error_handlers

# Import all models to register them with SQLModel metadata
from app.models.document import Document  # noqa: F401

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# --- App Initialization ---
app = FastAPI(
    title="Gift Exchange API",
    description="Gift exchange groups with join codes and secret recipient draws",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
register_error_handlers(app)


def build_notifier() -> MatchNotifier:
    """Build the match notifier, disabled when Redis is off or unreachable."""
    if not settings.NOTIFICATIONS_ENABLED:
        logger.info("Match notifications disabled by configuration")
        return MatchNotifier()

    connection = create_redis_connection()
    if not test_redis_connection(connection):
        logger.warning("Redis unavailable, match notifications disabled")
        return MatchNotifier()

    return MatchNotifier(create_notification_queue(connection))


# --- Event Handlers ---
@app.on_event("startup")
async def startup_event():
    logger.info("Starting up Gift Exchange API...")

    # Import here to avoid circular imports
    from app.core.database import engine

    if settings.AUTO_CREATE_TABLES:
        if engine:
            try:
                logger.info("Auto-creating database tables...")
                SQLModel.metadata.create_all(engine)
                logger.info("Database tables created successfully!")
            except Exception as e:
                logger.error(f"Failed to create database tables: {e}")
                logger.error("Database functionality may not work properly.")
        else:
            logger.warning("Database engine not available. Skipping table creation.")

    app.state.notifier = build_notifier()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Gift Exchange API...")


# --- API Endpoints ---
@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Gift Exchange API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint with database status."""
    from app.core.database import engine
    from sqlalchemy import text

    status = {"status": "healthy", "database": "unknown"}

    if engine:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            status["database"] = "connected"
        except Exception as e:
            status["database"] = f"error: {str(e)}"
            status["status"] = "degraded"
    else:
        status["database"] = "not_available"
        status["status"] = "degraded"

    notifier = getattr(app.state, "notifier", None)
    status["notifications"] = "enabled" if notifier and notifier.enabled else "disabled"

    return status
