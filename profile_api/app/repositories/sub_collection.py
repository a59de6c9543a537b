"""
Data access for arrays embedded in a profile document.

Events, milestones and testimonials are not stored as documents of
their own: each is an element of an array field inside the profile
document of the user that owns it.  ``SubCollectionRepository``
exposes that array as if it were a collection keyed by element
``_id``.  Every write is a single ``update_one`` so it is atomic with
respect to other writes on the same profile.

Methods are coroutines over a motor collection.  pymongo errors propagate unchanged so the calling service
can log them against the acting user.
"""

from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection

from ..core.db import get_profiles_collection
from ..core.errors import InvalidIdentifier, NotFound


def parse_object_id(value: Any) -> ObjectId:
    """Return ``value`` as an ``ObjectId`` or raise ``InvalidIdentifier``."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise InvalidIdentifier(f"Invalid identifier: {value!r}")


def write_ack(result, element_id: Optional[ObjectId] = None) -> Dict[str, Any]:
    """Normalise a pymongo ``UpdateResult`` into a JSON-friendly dict."""
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedId": str(upserted_id) if upserted_id is not None else None,
        "_id": str(element_id) if element_id is not None else None,
    }


class SubCollectionRepository:
    """Add/get/update/remove elements of one array field of a profile.

    Parameters
    ----------
    field : str
        Name of the array field, e.g. ``"events"``.
    collection_getter : callable
        Returns the profiles collection.  Resolved on every call so the
        shared client can be swapped (tests inject a mock store).
    order_field : str
        Element key holding the advisory display order.
    label : str, optional
        Element name used in not-found messages, e.g. ``"Event"``.
    """

    def __init__(
        self,
        field: str,
        collection_getter: Callable[[], AsyncIOMotorCollection] = get_profiles_collection,
        order_field: str = "order",
        label: Optional[str] = None,
    ) -> None:
        self.field = field
        self.label = label or field.rstrip("s").capitalize()
        self.order_field = order_field
        self._collection_getter = collection_getter

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection_getter()

    async def get_one(self, username: str, element_id: Any) -> Dict[str, Any]:
        """Return the element with ``element_id`` from ``username``'s profile.

        MongoDB cannot fetch an array element directly, so this runs a
        single aggregation: select the profile, unwind the array, keep
        the matching element and promote it to the result root.
        """
        oid = parse_object_id(element_id)
        pipeline = [
            {"$match": {"username": username}},
            {"$unwind": f"${self.field}"},
            {"$match": {f"{self.field}._id": oid}},
            {"$replaceRoot": {"newRoot": f"${self.field}"}},
            {"$limit": 1},
        ]
        results = await self.collection.aggregate(pipeline).to_list(length=1)
        if not results:
            raise NotFound(f"{self.label} not found.")
        return results[0]

    async def list_all(self, username: str) -> List[Dict[str, Any]]:
        """Return every element, ordered by the advisory ``order`` key.

        Elements without an order sort last; ties keep array position.
        A username without a profile has no elements.
        """
        doc = await self.collection.find_one({"username": username}, {self.field: 1})
        elements = (doc or {}).get(self.field) or []

        def sort_key(item):
            position, element = item
            order = element.get(self.order_field)
            return (order is None, order if isinstance(order, (int, float)) else 0, position)

        return [element for _, element in sorted(enumerate(elements), key=sort_key)]

    async def add(self, username: str, entity: Dict[str, Any]) -> Dict[str, Any]:
        """Append ``entity`` to the array, creating the profile if needed.

        The element id is generated here, at insertion time.  Content
        is not checked for duplicates.  Returns the write acknowledgment
        including the new element ``_id``.
        """
        element = dict(entity)
        element["_id"] = ObjectId()
        result = await self.collection.update_one(
            {"username": username},
            {"$push": {self.field: element}},
            upsert=True,
        )
        return write_ack(result, element["_id"])

    async def update(self, username: str, element_id: Any, entity: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the whole element ``element_id`` with ``entity``.

        The element keeps its ``_id``.  No upsert is performed: if the
        profile has no element with that id, ``NotFound`` is raised
        instead of reporting a vacuous success.
        """
        oid = parse_object_id(element_id)
        element = dict(entity)
        element["_id"] = oid
        result = await self.collection.update_one(
            {"username": username, f"{self.field}._id": oid},
            {"$set": {f"{self.field}.$": element}},
        )
        if result.matched_count == 0:
            raise NotFound(f"{self.label} not found.")
        return write_ack(result, oid)

    async def remove(self, username: str, element_id: Any) -> Dict[str, Any]:
        oid = parse_object_id(element_id)
        result = await self.collection.update_one(
            {"username": username, f"{self.field}._id": oid},
            {"$pull": {self.field: {"_id": oid}}},
        )
        if result.matched_count == 0:
            raise NotFound(f"{self.label} not found.")
        return write_ack(result, oid)

    async def upsert_by(self, username: str, key: str, value: Any, entity: Dict[str, Any]) -> Dict[str, Any]:
        """Update the element whose ``key`` equals ``value``, or add it.

        Existing elements are updated field by field so their ``_id``
        is kept.  When nothing matches, the entity is added as a new
        element (creating the profile if needed).
        """
        fields = {k: v for k, v in entity.items() if k != "_id"}
        fields[key] = value
        result = await self.collection.update_one(
            {"username": username, f"{self.field}.{key}": value},
            {"$set": {f"{self.field}.$.{k}": v for k, v in fields.items()}},
        )
        if result.matched_count == 0:
            return await self.add(username, fields)
        existing = await self.collection.find_one({"username": username}, {self.field: 1})
        element_id = next(
            (e.get("_id") for e in (existing or {}).get(self.field) or [] if e.get(key) == value),
            None,
        )
        return write_ack(result, element_id)
