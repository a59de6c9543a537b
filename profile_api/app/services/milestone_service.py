"""
Business logic for milestones.

Milestones are stored in the ``milestones`` array of the owner's
profile.  Icons are validated for shape only; whether the name exists
in the icon set is checked by the presentation layer.
"""

from ..schemas.milestone import MilestoneCreate, MilestoneRead
from .sub_entity import SubEntityService


class MilestoneService(SubEntityService):
    """Service for a user's milestones."""

    field = "milestones"
    label = "milestone"
    create_schema = MilestoneCreate
    read_schema = MilestoneRead
