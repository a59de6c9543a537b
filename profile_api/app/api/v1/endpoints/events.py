"""
Event endpoints for API v1.

``PUT`` without an id adds an event; with an id it replaces that
event.  Both return the store acknowledgment.  Payloads are accepted
as raw JSON objects and validated by ``EventService`` so failures
come back as ``{"message": {field: error}}``.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from profile_api.app.core.security import get_current_username
from profile_api.app.schemas.common import WriteAck
from profile_api.app.schemas.event import EventRead
from profile_api.app.services.event_service import EventService


router = APIRouter()


@router.get("", response_model=List[EventRead])
async def list_events(username: str = Depends(get_current_username)) -> List[EventRead]:
    """List the current user's events ordered by their ``order`` value."""
    return await EventService.list(username)


@router.put("", response_model=WriteAck)
async def add_event(
    payload: Dict[str, Any] = Body(...),
    username: str = Depends(get_current_username),
) -> Dict[str, Any]:
    return await EventService.add(username, payload)


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: str, username: str = Depends(get_current_username)) -> EventRead:
    """Retrieve a single event by its id, or 404."""
    return await EventService.get(username, event_id)


@router.put("/{event_id}", response_model=WriteAck)
async def update_event(
    event_id: str,
    payload: Dict[str, Any] = Body(...),
    username: str = Depends(get_current_username),
) -> Dict[str, Any]:
    """Replace an existing event.  Unknown ids are reported as 404."""
    return await EventService.update(username, event_id, payload)


@router.delete("/{event_id}", response_model=WriteAck)
async def delete_event(event_id: str, username: str = Depends(get_current_username)) -> Dict[str, Any]:
    return await EventService.remove(username, event_id)
