"""
Top-level router for version 1 of the API.

This router aggregates the routers for each profile sub-resource.
The ``/account/manage`` prefix holds everything a user manages on
their own profile.
"""

from fastapi import APIRouter

from .endpoints import events, health, milestones, testimonials

router = APIRouter()

router.include_router(events.router, prefix="/account/manage/event", tags=["events"])
router.include_router(milestones.router, prefix="/account/manage/milestone", tags=["milestones"])
router.include_router(testimonials.router, prefix="/account/manage/testimonials", tags=["testimonials"])
router.include_router(testimonials.users_router, prefix="/users", tags=["testimonials"])
router.include_router(health.router, prefix="/health", tags=["health"])
