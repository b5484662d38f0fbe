from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from gift_core import format_code

from ..models.group import Group


class Occasion(str, Enum):
    """Occasions a gift exchange can be organized for."""

    CHRISTMAS = "Christmas"
    BIRTHDAY = "Birthday"
    WEDDING = "Wedding"
    BABY_SHOWER = "Baby Shower"
    ANNIVERSARY = "Anniversary"
    GRADUATION = "Graduation"
    OTHER = "Other"


class GroupCreate(BaseModel):
    """Group creation request."""

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    occasion: Occasion
    budget: Optional[str] = Field(default=None, max_length=50)
    gift_exchange_date: Optional[date] = None


class GroupResponse(BaseModel):
    """Group response model."""

    id: str
    name: str
    description: str
    occasion: Optional[str]
    budget: Optional[str]
    gift_exchange_date: Optional[date]
    created_by: str
    members: List[str]
    member_count: int
    max_members: int
    code: str
    display_code: str
    has_matches: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_group(cls, group: Group) -> "GroupResponse":
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            occasion=group.occasion,
            budget=group.budget,
            gift_exchange_date=group.gift_exchange_date,
            created_by=group.created_by,
            members=group.members,
            member_count=group.member_count,
            max_members=group.max_members,
            code=group.code,
            display_code=format_code(group.code),
            has_matches=group.has_matches,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class GroupJoinRequest(BaseModel):
    """Group join request. The code may include the display dash."""

    code: str = Field(min_length=1, max_length=20)


class MatchSummary(BaseModel):
    """Outcome of matching, without revealing any pairing."""

    group_id: str
    matched_count: int
    created_by: str
    created_at: datetime


class RecipientResponse(BaseModel):
    """The caller's own gift recipient."""

    group_id: str
    recipient_id: str
