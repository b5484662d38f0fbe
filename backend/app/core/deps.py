from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlmodel import Session

from .database import get_db
from .notifications import MatchNotifier
from .store import DocumentStore, SQLDocumentStore
from ..services.group_service import GroupService


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None),
) -> str:
    """
    Get the id of the calling user.

    Authentication happens upstream; the gateway forwards the verified user
    id in the ``X-User-Id`` header.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return x_user_id.strip()


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return SQLDocumentStore(db)


def get_notifier(request: Request) -> MatchNotifier:
    """Return the notifier built at startup, or a disabled one."""
    return getattr(request.app.state, "notifier", None) or MatchNotifier()


def get_group_service(
    store: DocumentStore = Depends(get_store),
    notifier: MatchNotifier = Depends(get_notifier),
) -> GroupService:
    return GroupService(store, notifier)
