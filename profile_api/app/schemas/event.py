"""
Pydantic models for event data.

``EventBase`` holds the validated fields shared by requests and
responses.  ``EventCreate`` is the add/update payload, optionally
carrying the element's own ``_id``; ``EventRead`` is an event as
stored, with its identifier.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import IsoDate, SubEntityRead, as_datetime


class DateRange(BaseModel):
    start: IsoDate = Field(..., examples=["2022-12-09T16:00:00.000+00:00"])
    end: IsoDate = Field(..., examples=["2022-12-09T18:00:00.000+00:00"])

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if as_datetime(self.start) > as_datetime(self.end):
            raise ValueError("End date must be on or after the start date")
        return self


class EventBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=2, max_length=256, examples=["Conf"])
    description: Optional[str] = Field(None, max_length=512, examples=["Yearly community conference"])
    url: str = Field(..., min_length=2, max_length=256, examples=["https://example.com/conf"])
    date: DateRange
    is_virtual: bool = Field(False, alias="isVirtual")
    # Free-form ticket price as entered by the user, "0" for free events
    price: Optional[str] = Field(None, max_length=32, examples=["0"])
    order: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class EventCreate(EventBase):
    """Schema for adding or replacing an event."""

    id: Optional[str] = Field(None, alias="_id")


class EventRead(SubEntityRead, EventBase):
    """Schema for reading an event from the API."""
    pass
