import logging
from typing import Optional

from sqlmodel import Session

from .core.database import engine
from .core.store import SQLDocumentStore
from .models.group import GROUPS

logger = logging.getLogger(__name__)

NOTIFICATIONS = "notifications"


def deliver_match_notification(group_id: str, user_id: str) -> Optional[str]:
    """
    Record an in-app notification telling a member their recipient is ready.

    The recipient itself is not included; members look it up through the
    group.

    Returns:
        The notification id, or None if the group no longer exists.
    """
    if engine is None:
        raise RuntimeError("Database engine not available")

    with Session(engine) as session:
        store = SQLDocumentStore(session)

        group = store.get(GROUPS, group_id)
        if group is None:
            logger.warning(f"Group {group_id} not found, dropping notification for {user_id}")
            return None

        notification_id = store.create(
            NOTIFICATIONS,
            {
                "userId": user_id,
                "groupId": group_id,
                "type": "matches_ready",
                "title": "Your gift exchange match is ready",
                "body": f"Open {group.get('name', 'your group')} to see who you're buying for.",
                "read": False,
            },
        )

    logger.info(f"Delivered match notification {notification_id} to {user_id}")
    return notification_id
