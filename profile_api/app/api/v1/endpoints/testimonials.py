"""
Testimonial endpoints for API v1.

Owners list the testimonials written about them and choose which to
pin.  ``PUT /account/manage/testimonials`` replaces the whole pinned
set with the usernames in the body; the ``/{username}/pin`` routes
toggle one writer without a read-modify-write cycle and are the
safer choice for clients that toggle pins one at a time.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from profile_api.app.core.security import get_current_username
from profile_api.app.schemas.common import WriteAck
from profile_api.app.schemas.testimonial import TestimonialRead
from profile_api.app.services.testimonial_service import TestimonialService


router = APIRouter()
users_router = APIRouter()


@router.get("", response_model=List[TestimonialRead])
async def list_testimonials(username: str = Depends(get_current_username)) -> List[TestimonialRead]:
    """List testimonials about the current user with their pinned state."""
    return await TestimonialService.list_for_owner(username)


@router.put("", response_model=WriteAck)
async def set_pinned_testimonials(
    usernames: List[str] = Body(...),
    username: str = Depends(get_current_username),
) -> Dict[str, Any]:
    return await TestimonialService.set_pinned(username, usernames)


@router.put("/{writer}/pin", response_model=WriteAck)
async def pin_testimonial(writer: str, username: str = Depends(get_current_username)) -> Dict[str, Any]:
    return await TestimonialService.pin(username, writer)


@router.delete("/{writer}/pin", response_model=WriteAck)
async def unpin_testimonial(writer: str, username: str = Depends(get_current_username)) -> Dict[str, Any]:
    return await TestimonialService.unpin(username, writer)


@users_router.put("/{subject}/testimonial", response_model=WriteAck)
async def write_testimonial(
    subject: str,
    payload: Dict[str, Any] = Body(...),
    username: str = Depends(get_current_username),
) -> Dict[str, Any]:
    """Write or replace the current user's testimonial about ``subject``."""
    return await TestimonialService.add_testimonial(username, subject, payload)
