"""
Application errors.

Every error carries the HTTP status and machine-readable code it is reported
with. Handlers in ``app.api.errors`` turn them into JSON responses.
"""


class GiftExchangeError(Exception):
    """Base class for application errors."""

    status_code: int = 500
    code: str = "internal_error"
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# --- Store errors ---


class StoreUnavailableError(GiftExchangeError):
    status_code = 503
    code = "store_unavailable"
    default_detail = "The data store is temporarily unavailable. Please try again later."


class DocumentNotFoundError(GiftExchangeError):
    status_code = 404
    code = "document_not_found"
    default_detail = "The requested document was not found"


class DuplicateDocumentError(GiftExchangeError):
    status_code = 409
    code = "duplicate_document"
    default_detail = "A document with this key already exists"


class CorruptDocumentError(GiftExchangeError):
    status_code = 500
    code = "corrupt_document"
    default_detail = "A stored document failed validation"


# --- Group errors ---


class GroupNotFoundError(GiftExchangeError):
    status_code = 404
    code = "group_not_found"
    default_detail = "Group not found"


class InvalidGroupCodeError(GroupNotFoundError):
    code = "invalid_group_code"
    default_detail = "Invalid group code. Please check and try again."


class NotAGroupMemberError(GiftExchangeError):
    status_code = 403
    code = "not_a_member"
    default_detail = "You do not have access to this group"


class NotGroupOwnerError(GiftExchangeError):
    status_code = 403
    code = "not_group_owner"
    default_detail = "Only the group owner can do this"


class AlreadyMemberError(GiftExchangeError):
    status_code = 409
    code = "already_member"
    default_detail = "You are already a member of this group."


class GroupFullError(GiftExchangeError):
    status_code = 409
    code = "group_full"
    default_detail = "This group has reached its maximum capacity."


class MatchesAlreadyGeneratedError(GiftExchangeError):
    status_code = 409
    code = "matches_already_generated"
    default_detail = "Gift exchange matches have already been generated for this group."


class MatchesNotGeneratedError(GiftExchangeError):
    status_code = 404
    code = "matches_not_generated"
    default_detail = "No match assigned yet"


class OwnerCannotLeaveError(GiftExchangeError):
    status_code = 400
    code = "owner_cannot_leave"
    default_detail = "As the owner, you can't leave your own group."


class OwnedGroupLimitError(GiftExchangeError):
    status_code = 400
    code = "owned_group_limit"
    default_detail = "You have reached the limit of groups you can own."


class GroupCodeConflictError(GiftExchangeError):
    status_code = 409
    code = "group_code_conflict"
    default_detail = "Another group claimed the same code. Please try again."
