from typing import List

from fastapi import APIRouter, Depends, status

from ..core.deps import get_current_user_id, get_group_service
from ..schemas.group import (
    GroupCreate,
    GroupJoinRequest,
    GroupResponse,
    MatchSummary,
    RecipientResponse,
)
from ..services.group_service import GroupService

router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """Create a new group with the caller as owner and only member."""
    group = service.create_group(current_user_id, group_data)
    return GroupResponse.from_group(group)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """List the groups the caller belongs to."""
    return [GroupResponse.from_group(g) for g in service.list_groups(current_user_id)]


@router.post("/join", response_model=GroupResponse)
async def join_group(
    join_data: GroupJoinRequest,
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """Join a group by its code."""
    group = service.join_group(current_user_id, join_data.code)
    return GroupResponse.from_group(group)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """Get group information."""
    return GroupResponse.from_group(service.get_group(group_id, current_user_id))


@router.post("/{group_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
async def leave_group(
    group_id: str,
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """Leave a group. The owner cannot leave."""
    service.leave_group(current_user_id, group_id)


@router.post("/{group_id}/matches", response_model=MatchSummary, status_code=status.HTTP_201_CREATED)
async def generate_matches(
    group_id: str,
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """Draw the gift exchange. Owner only; pairings are not returned."""
    result = service.generate_group_matches(current_user_id, group_id)
    return MatchSummary(
        group_id=group_id,
        matched_count=len(result.matched_users),
        created_by=result.created_by,
        created_at=result.created_at,
    )


@router.get("/{group_id}/matches/me", response_model=RecipientResponse)
async def get_my_recipient(
    group_id: str,
    service: GroupService = Depends(get_group_service),
    current_user_id: str = Depends(get_current_user_id),
):
    """Get the member the caller gives a gift to."""
    recipient_id = service.get_recipient(current_user_id, group_id)
    return RecipientResponse(group_id=group_id, recipient_id=recipient_id)
