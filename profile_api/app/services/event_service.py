"""
Business logic for events.

Events are stored in the ``events`` array of the owner's profile.
Name and URL are required (2-256 characters) together with a start
and end date; the end date may not precede the start date.
"""

from ..schemas.event import EventCreate, EventRead
from .sub_entity import SubEntityService


class EventService(SubEntityService):
    """Service for a user's events."""

    field = "events"
    label = "event"
    create_schema = EventCreate
    read_schema = EventRead
