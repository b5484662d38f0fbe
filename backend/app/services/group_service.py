"""
Group lifecycle: creation with a join code, joining, leaving and the
owner-triggered gift exchange draw.

Every operation reads the group fresh from the store and writes back with a
single create or update. Nothing is cached between calls.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from gift_core import (
    ensure_unique_code,
    generate_matches,
    is_valid_code,
    normalize_code,
    verify_matches,
)

from ..core.config import settings
from ..core.exceptions import (
    AlreadyMemberError,
    DuplicateDocumentError,
    GroupCodeConflictError,
    GroupFullError,
    GroupNotFoundError,
    InvalidGroupCodeError,
    MatchesAlreadyGeneratedError,
    MatchesNotGeneratedError,
    NotAGroupMemberError,
    NotGroupOwnerError,
    OwnedGroupLimitError,
    OwnerCannotLeaveError,
)
from ..core.notifications import MatchNotifier
from ..core.store import DocumentStore
from ..models.group import GROUPS, Group, MatchResult
from ..schemas.group import GroupCreate

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(
        self,
        store: DocumentStore,
        notifier: Optional[MatchNotifier] = None,
        max_members: int = settings.GROUP_MAX_MEMBERS,
        max_owned_groups: int = settings.MAX_OWNED_GROUPS,
        code_attempts: int = settings.GROUP_CODE_ATTEMPTS,
        match_attempts: int = settings.MATCH_MAX_ATTEMPTS,
    ):
        self.store = store
        self.notifier = notifier or MatchNotifier()
        self.max_members = max_members
        self.max_owned_groups = max_owned_groups
        self.code_attempts = code_attempts
        self.match_attempts = match_attempts

    # --- Lookups ---

    def _load(self, group_id: str) -> Group:
        document = self.store.get(GROUPS, group_id)
        if document is None:
            raise GroupNotFoundError()
        return Group.from_document(document)

    def _load_for_member(self, group_id: str, user_id: str) -> Group:
        group = self._load(group_id)
        if user_id not in group.members:
            raise NotAGroupMemberError()
        return group

    def code_exists(self, code: str) -> bool:
        return bool(self.store.query(GROUPS, [("groupCode", "==", code)]))

    def get_group(self, group_id: str, user_id: str) -> Group:
        """Return a group the user belongs to."""
        return self._load_for_member(group_id, user_id)

    def list_groups(self, user_id: str) -> List[Group]:
        """Return every group the user belongs to."""
        documents = self.store.query(GROUPS, [("members", "array-contains", user_id)])
        return [Group.from_document(document) for document in documents]

    def find_group_by_code(self, code: str) -> Group:
        """Look a group up by user-typed join code (dash and case optional)."""
        if not is_valid_code(code):
            raise InvalidGroupCodeError()

        documents = self.store.query(GROUPS, [("groupCode", "==", normalize_code(code))])
        if not documents:
            raise InvalidGroupCodeError()
        if len(documents) > 1:
            logger.warning(f"Join code shared by {len(documents)} groups, using the oldest")
        return Group.from_document(documents[0])

    # --- Lifecycle ---

    def create_group(self, owner_id: str, data: GroupCreate) -> Group:
        """
        Create a group owned by ``owner_id`` with a fresh join code.

        Raises:
            OwnedGroupLimitError: The owner already owns the maximum number of groups.
            CodeCollisionExhaustedError: No unused code found within the attempt bound.
            GroupCodeConflictError: A concurrent creation claimed the same code.
        """
        owned = self.store.query(GROUPS, [("createdBy", "==", owner_id)])
        if len(owned) >= self.max_owned_groups:
            raise OwnedGroupLimitError(
                f"You can only own up to {self.max_owned_groups} groups."
            )

        code = ensure_unique_code(self.code_exists, max_attempts=self.code_attempts)

        document = {
            "name": data.name.strip(),
            "description": data.description.strip(),
            "occasion": data.occasion.value,
            "budget": data.budget,
            "giftExchangeDate": data.gift_exchange_date.isoformat() if data.gift_exchange_date else None,
            "groupCode": code,
            "createdBy": owner_id,
            "members": [owner_id],
            "maxMembers": self.max_members,
            "matchData": None,
        }

        try:
            group_id = self.store.create(GROUPS, document, unique_field="groupCode")
        except DuplicateDocumentError as e:
            raise GroupCodeConflictError() from e

        logger.info(f"User {owner_id} created group {group_id}")
        return self._load(group_id)

    def join_group(self, user_id: str, code: str) -> Group:
        """
        Add ``user_id`` to the group with the given join code.

        Capacity is checked against the member list read just before the
        write; concurrent joins can still overshoot it.
        """
        group = self.find_group_by_code(code)

        if user_id in group.members:
            raise AlreadyMemberError()
        if group.has_matches:
            raise MatchesAlreadyGeneratedError(
                "Matches have already been drawn for this group; it is closed to new members."
            )
        if group.is_full:
            raise GroupFullError(
                f"This group has reached its maximum capacity of {group.max_members} members."
            )

        self.store.update(GROUPS, group.id, {"members": [*group.members, user_id]})

        logger.info(f"User {user_id} joined group {group.id}")
        return self._load(group.id)

    def leave_group(self, user_id: str, group_id: str) -> None:
        group = self._load_for_member(group_id, user_id)

        if group.is_owner(user_id):
            raise OwnerCannotLeaveError()
        if group.has_matches:
            raise MatchesAlreadyGeneratedError(
                "Matches have already been drawn; members can no longer leave this group."
            )

        members = [member for member in group.members if member != user_id]
        self.store.update(GROUPS, group.id, {"members": members})
        logger.info(f"User {user_id} left group {group.id}")

    # --- Matching ---

    def generate_group_matches(self, user_id: str, group_id: str) -> MatchResult:
        """
        Draw the gift exchange for a group. Owner only, once per group.

        Raises:
            NotGroupOwnerError: The caller does not own the group.
            MatchesAlreadyGeneratedError: The draw already happened.
            InsufficientMembersError: Fewer than two members.
            MatchExhaustedError: No valid draw within the attempt bound.
        """
        group = self._load_for_member(group_id, user_id)

        if not group.is_owner(user_id):
            raise NotGroupOwnerError("Only the group owner can generate matches")
        if group.has_matches:
            raise MatchesAlreadyGeneratedError()

        matches = generate_matches(group.members, max_attempts=self.match_attempts)
        verify_matches(matches, group.members)

        result = MatchResult(
            matches=matches,
            matched_users=list(matches),
            created_by=user_id,
            created_at=datetime.now(timezone.utc),
        )
        self.store.update(GROUPS, group.id, {"matchData": result.to_document()})
        logger.info(f"Generated matches for group {group.id} ({len(matches)} members)")

        self.notifier.notify_matches_ready(group.id, result.matched_users)
        return result

    def get_recipient(self, user_id: str, group_id: str) -> str:
        """Return the id of the member ``user_id`` buys a gift for."""
        group = self._load_for_member(group_id, user_id)

        if not group.has_matches:
            raise MatchesNotGeneratedError()

        recipient = group.match_data.matches.get(user_id)
        if recipient is None:
            raise MatchesNotGeneratedError()
        return recipient
