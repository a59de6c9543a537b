"""
Generic service for sub-entities embedded in a profile.

``SubEntityService`` implements get/list/add/update/remove on top of
``SubCollectionRepository``.  Concrete services bind a profile field
and a pair of schemas::

    class EventService(SubEntityService):
        field = "events"
        create_schema = EventCreate
        read_schema = EventRead

Validation happens before any store call.  Store failures are
logged with the acting username and surfaced as ``StoreUnavailable``
so the pymongo error never reaches the caller.
"""

from typing import Any, Awaitable, ClassVar, Dict, List, Mapping, Type

from bson import ObjectId
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from ..core.errors import InvalidIdentifier, NotFound, StoreUnavailable, ValidationError, field_errors
from ..core.logging_config import get_user_logger
from ..repositories.sub_collection import SubCollectionRepository, parse_object_id


def _same_id(value: Any, oid: ObjectId) -> bool:
    # Hex ids are case-insensitive
    try:
        return parse_object_id(value) == oid
    except InvalidIdentifier:
        return False


class SubEntityService:
    """Base class for services over one embedded array field."""

    field: ClassVar[str]
    label: ClassVar[str]
    create_schema: ClassVar[Type[BaseModel]]
    read_schema: ClassVar[Type[BaseModel]]

    @classmethod
    def repository(cls) -> SubCollectionRepository:
        return SubCollectionRepository(cls.field, label=cls.label.capitalize())

    @classmethod
    def validate(cls, payload: Any) -> BaseModel:
        """Validate ``payload`` with the create schema.

        Raises ``ValidationError`` with per-field messages.
        """
        if isinstance(payload, cls.create_schema):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True)
        if not isinstance(payload, Mapping):
            raise ValidationError({"body": f"Expected a JSON object describing the {cls.label}"})
        try:
            return cls.create_schema.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(field_errors(e)) from e

    @classmethod
    def to_document(cls, data: BaseModel) -> Dict[str, Any]:
        """Dump a validated payload in the persisted camelCase shape."""
        return data.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)

    @classmethod
    async def _run(cls, username: str, action: str, operation: Awaitable[Any]) -> Any:
        log = get_user_logger(__name__, username)
        try:
            return await operation
        except PyMongoError as e:
            log.error("failed to %s %s: %s", action, cls.label, e)
            raise StoreUnavailable(f"Failed to {action} {cls.label}.") from e

    @classmethod
    async def get(cls, username: str, element_id: str) -> BaseModel:
        """Return one sub-entity of ``username``'s profile."""
        repo = cls.repository()
        try:
            doc = await cls._run(username, "load", repo.get_one(username, element_id))
        except NotFound:
            # Expected outcome, not an error
            get_user_logger(__name__, username).info("%s %s not found", cls.label, element_id)
            raise
        return cls.read_schema.model_validate(doc)

    @classmethod
    async def list(cls, username: str) -> List[BaseModel]:
        repo = cls.repository()
        docs = await cls._run(username, "list", repo.list_all(username))
        return [cls.read_schema.model_validate(doc) for doc in docs]

    @classmethod
    async def add(cls, username: str, payload: Any) -> Dict[str, Any]:
        """Validate and append a new sub-entity, creating the profile if needed."""
        data = cls.validate(payload)
        repo = cls.repository()
        ack = await cls._run(username, "add", repo.add(username, cls.to_document(data)))
        get_user_logger(__name__, username).info("added %s %s", cls.label, ack["_id"])
        return ack

    @classmethod
    async def update(cls, username: str, element_id: str, payload: Any) -> Dict[str, Any]:
        """Replace an existing sub-entity.

        If the payload carries its own ``_id`` it must name the same
        element as ``element_id``.
        """
        oid = parse_object_id(element_id)
        data = cls.validate(payload)
        payload_id = getattr(data, "id", None)
        if payload_id is not None and not _same_id(payload_id, oid):
            raise ValidationError({"_id": f"Does not match the {cls.label} being updated"})
        repo = cls.repository()
        ack = await cls._run(username, "update", repo.update(username, oid, cls.to_document(data)))
        get_user_logger(__name__, username).info("updated %s %s", cls.label, oid)
        return ack

    @classmethod
    async def remove(cls, username: str, element_id: str) -> Dict[str, Any]:
        repo = cls.repository()
        ack = await cls._run(username, "remove", repo.remove(username, element_id))
        get_user_logger(__name__, username).info("removed %s %s", cls.label, element_id)
        return ack
