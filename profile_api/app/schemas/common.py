"""
Schemas shared by every sub-resource.
"""

import datetime
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, field_validator


_DATE = TypeAdapter(datetime.date)
_DATETIME = TypeAdapter(datetime.datetime)


def as_datetime(value: str) -> datetime.datetime:
    """Parse an ISO date or date-time into a naive UTC ``datetime``.

    Plain dates (``2024-01-01``) are taken as midnight.  Raises
    ``ValueError`` if ``value`` is neither.
    """
    try:
        if len(value) == 10:
            return datetime.datetime.combine(_DATE.validate_python(value), datetime.time())
        parsed = _DATETIME.validate_python(value)
    except ValueError:
        raise ValueError("Expected an ISO 8601 date or date-time") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


def _date_to_text(value: Any) -> Any:
    # Documents written by other clients may hold BSON dates
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def _check_date_text(value: str) -> str:
    as_datetime(value)
    return value


# A date or date-time kept in the ISO form it was submitted in
IsoDate = Annotated[str, BeforeValidator(_date_to_text), AfterValidator(_check_date_text)]


class SubEntityRead(BaseModel):
    """Mixin for sub-entities read back from the store.

    The store identifier is exposed as ``_id`` in JSON and converted
    from ``ObjectId`` to its hex string.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v


class WriteAck(BaseModel):
    """Acknowledgment returned by add/update/remove operations."""

    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    matched_count: int = Field(0, alias="matchedCount")
    modified_count: int = Field(0, alias="modifiedCount")
    upserted_id: Optional[str] = Field(None, alias="upsertedId")
    id: Optional[str] = Field(None, alias="_id")
