"""
Pydantic schemas for testimonials.

A testimonial is written by one user about another and stored in the
writer's profile, keyed by the subject's ``username``.  The subject
only records which writers are pinned on their page.
"""

from typing import Any, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import IsoDate


class TestimonialCreate(BaseModel):
    """Payload for writing a testimonial about another user."""

    title: str = Field(..., min_length=2, max_length=256)
    description: str = Field(..., min_length=2, max_length=512)
    date: Optional[IsoDate] = None


class TestimonialRead(BaseModel):
    """A testimonial about the current user, as listed for pinning.

    ``username`` is the writer of the testimonial.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    username: str
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[IsoDate] = None
    is_pinned: bool = Field(False, alias="isPinned")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, ObjectId) else v


class PinnedUsernames(BaseModel):
    """Validated set of usernames to pin."""

    usernames: List[str] = Field(default_factory=list)

    @field_validator("usernames")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        seen: List[str] = []
        for name in v:
            name = name.strip()
            if not name:
                raise ValueError("Usernames must not be empty")
            if name not in seen:
                seen.append(name)
        return seen
