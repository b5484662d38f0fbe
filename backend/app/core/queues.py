import logging
from redis import Redis
from rq import Queue

from .config import settings

logger = logging.getLogger(__name__)


def create_redis_connection() -> Redis:
    """Create a Redis connection from settings."""
    return Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        db=settings.REDIS_DB,
        decode_responses=False,
    )


def create_notification_queue(connection: Redis) -> Queue:
    """Queue for member notification jobs."""
    return Queue(settings.NOTIFICATION_QUEUE, connection=connection)


def test_redis_connection(connection: Redis) -> bool:
    """Test Redis connection."""
    try:
        connection.ping()
        logger.info("Redis connection successful")
        return True
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        return False
