"""
Pydantic models for milestone data.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import IsoDate, SubEntityRead


# Icons are referenced by their component name, e.g. ``FaGithub``
ICON_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


class MilestoneBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=2, max_length=256, examples=["First open source contribution"])
    description: str = Field(..., min_length=2, max_length=512)
    url: Optional[str] = Field(None, max_length=256)
    icon: str = Field(..., min_length=2, max_length=32, examples=["FaGithub"])
    date: IsoDate
    is_goal: bool = Field(False, alias="isGoal")
    order: Optional[int] = None

    @field_validator("icon")
    @classmethod
    def icon_symbol(cls, v: str) -> str:
        if not ICON_NAME_RE.match(v):
            raise ValueError("Icon must be an icon name such as 'FaGithub'")
        return v


class MilestoneCreate(MilestoneBase):
    """Schema for adding or replacing a milestone."""

    id: Optional[str] = Field(None, alias="_id")


class MilestoneRead(SubEntityRead, MilestoneBase):
    """Schema for reading a milestone from the API."""
    pass
