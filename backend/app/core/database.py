from sqlalchemy import create_engine
from sqlalchemy import text
from sqlmodel import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import logging
from fastapi import HTTPException

from .config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,  # Recycle connections every 5 minutes
        "pool_size": 10,
        "max_overflow": 20,
    }


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((Exception,)),
    reraise=True
)
def create_database_engine(url: str = settings.DATABASE_URL):
    """Create database engine with retry logic."""
    logger.info(f"Attempting to connect to database: {url.split('@')[1] if '@' in url else url.split(':')[0]}")

    engine = create_engine(url, echo=settings.DEBUG, **_engine_kwargs(url))

    # Test the connection
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        logger.info("Database connection successful!")

    return engine


try:
    engine = create_database_engine()
except Exception as e:
    logger.error(f"Failed to create database engine after retries: {e}")
    # Requests will get a 503 from get_db until the service is restarted
    engine = None


def get_db():
    """Get database session."""
    if not engine:
        raise HTTPException(
            status_code=503,
            detail="Database is temporarily unavailable. Please try again later."
        )

    with Session(engine) as session:
        yield session
