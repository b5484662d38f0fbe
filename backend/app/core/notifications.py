import logging
from typing import Iterable, Optional

from redis.exceptions import RedisError
from rq import Queue

from ..worker_tasks import deliver_match_notification

logger = logging.getLogger(__name__)


class MatchNotifier:
    """
    Tells group members that their gift recipient has been drawn.

    Built once when the application starts and handed to the services that
    need it. Without a queue every call is a logged no-op. Notifications are
    best-effort: an enqueue failure is logged and never undoes the match that
    triggered it.
    """

    def __init__(self, queue: Optional[Queue] = None):
        self.queue = queue

    @property
    def enabled(self) -> bool:
        return self.queue is not None

    def notify_matches_ready(self, group_id: str, member_ids: Iterable[str]) -> int:
        """Enqueue one notification job per member. Returns the number enqueued."""
        if not self.enabled:
            logger.info(f"Notifications disabled, skipping match notifications for group {group_id}")
            return 0

        enqueued = 0
        for user_id in member_ids:
            try:
                self.queue.enqueue(
                    deliver_match_notification,
                    group_id,
                    user_id,
                    job_timeout=30,
                )
            except RedisError as e:
                logger.error(f"Failed to enqueue match notification for group {group_id}: {e}")
                break
            enqueued += 1

        logger.info(f"Enqueued {enqueued} match notifications for group {group_id}")
        return enqueued
