from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from gift_core import verify_matches

from ..core.exceptions import CorruptDocumentError

GROUPS = "groups"


class MatchResult(BaseModel):
    """Giver to recipient assignment attached to a group once matching ran."""

    matches: Dict[str, str]
    matched_users: List[str] = Field(alias="matchedUsers")
    created_by: str = Field(alias="createdBy")
    created_at: datetime = Field(alias="createdAt")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_assignment(self) -> "MatchResult":
        verify_matches(self.matches, self.matched_users)
        return self

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Group(BaseModel):
    """
    Gift exchange group as stored in the ``groups`` collection.

    Stored documents use the camelCase field names of the web client
    (``groupCode``, ``createdBy``, ``maxMembers``, ``matchData``); the
    aliases below map them onto Python names.
    """

    id: str
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    occasion: Optional[str] = None
    budget: Optional[str] = None
    gift_exchange_date: Optional[date] = Field(default=None, alias="giftExchangeDate")

    # Ownership and membership
    created_by: str = Field(alias="createdBy")
    members: List[str]
    max_members: int = Field(alias="maxMembers", ge=2)

    code: str = Field(alias="groupCode")
    match_data: Optional[MatchResult] = Field(default=None, alias="matchData")

    # Timestamps
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_membership(self) -> "Group":
        if len(set(self.members)) != len(self.members):
            raise ValueError("Group members must be unique")
        if self.created_by not in self.members:
            raise ValueError("Group owner must be a member")
        if len(self.members) > self.max_members:
            raise ValueError(
                f"Group has {len(self.members)} members, more than the limit of {self.max_members}"
            )
        return self

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Group":
        """Validate a raw store document into a Group."""
        try:
            return cls.model_validate(document)
        except ValidationError as e:
            raise CorruptDocumentError(
                f"Group {document.get('id')} failed validation: {e.error_count()} error(s)"
            ) from e

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.max_members

    @property
    def has_matches(self) -> bool:
        return self.match_data is not None and bool(self.match_data.matches)

    def is_owner(self, user_id: str) -> bool:
        return self.created_by == user_id
