"""
Milestone endpoints for API v1.

``PUT`` without an id adds a milestone; with an id it replaces that
milestone.  Both return the store acknowledgment.  Payloads are accepted
as raw JSON objects and validated by ``MilestoneService`` so failures
come back as ``{"message": {field: error}}``.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from profile_api.app.core.security import get_current_username
from profile_api.app.schemas.common import WriteAck
from profile_api.app.schemas.milestone import MilestoneRead
from profile_api.app.services.milestone_service import MilestoneService


router = APIRouter()


@router.get("", response_model=List[MilestoneRead])
async def list_milestones(username: str = Depends(get_current_username)) -> List[MilestoneRead]:
    """List the current user's milestones ordered by their ``order`` value."""
    return await MilestoneService.list(username)


@router.put("", response_model=WriteAck)
async def add_milestone(
    payload: Dict[str, Any] = Body(...),
    username: str = Depends(get_current_username),
) -> Dict[str, Any]:
    return await MilestoneService.add(username, payload)


@router.get("/{milestone_id}", response_model=MilestoneRead)
async def get_milestone(milestone_id: str, username: str = Depends(get_current_username)) -> MilestoneRead:
    """Retrieve a single milestone by its id, or 404."""
    return await MilestoneService.get(username, milestone_id)


@router.put("/{milestone_id}", response_model=WriteAck)
async def update_milestone(
    milestone_id: str,
    payload: Dict[str, Any] = Body(...),
    username: str = Depends(get_current_username),
) -> Dict[str, Any]:
    """Replace an existing milestone.  Unknown ids are reported as 404."""
    return await MilestoneService.update(username, milestone_id, payload)


@router.delete("/{milestone_id}", response_model=WriteAck)
async def delete_milestone(milestone_id: str, username: str = Depends(get_current_username)) -> Dict[str, Any]:
    return await MilestoneService.remove(username, milestone_id)
