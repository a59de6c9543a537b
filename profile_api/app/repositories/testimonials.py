"""
Data access for testimonials and the pinned-testimonial set.

Testimonial content lives in the writer's profile, in its
``testimonials`` array, with ``username`` naming the subject.  The
subject's profile only stores ``pinnedTestimonials``: the usernames of
writers whose testimonial is shown on their page.
"""

from typing import Any, Callable, Dict, Iterable, List

from motor.motor_asyncio import AsyncIOMotorCollection

from ..core.db import get_profiles_collection
from .sub_collection import write_ack


PINNED_FIELD = "pinnedTestimonials"
TESTIMONIALS_FIELD = "testimonials"


class TestimonialRepository:
    def __init__(self, collection_getter: Callable[[], AsyncIOMotorCollection] = get_profiles_collection) -> None:
        self._collection_getter = collection_getter

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection_getter()

    async def written_about(self, username: str) -> List[Dict[str, Any]]:
        """Return every testimonial written about ``username``.

        Uses the ``testimonials.username`` index to select writers,
        then unwinds their testimonials and keeps those about
        ``username``.  Each result is the stored testimonial with
        ``username`` replaced by the writer's username.
        """
        pipeline = [
            {"$match": {f"{TESTIMONIALS_FIELD}.username": username}},
            {"$project": {"username": 1, TESTIMONIALS_FIELD: 1}},
            {"$unwind": f"${TESTIMONIALS_FIELD}"},
            {"$match": {f"{TESTIMONIALS_FIELD}.username": username}},
        ]
        results = []
        async for doc in self.collection.aggregate(pipeline):
            testimonial = dict(doc[TESTIMONIALS_FIELD])
            testimonial["username"] = doc["username"]
            results.append(testimonial)
        return results

    async def get_pinned(self, username: str) -> List[str]:
        doc = await self.collection.find_one({"username": username}, {PINNED_FIELD: 1})
        return list((doc or {}).get(PINNED_FIELD) or [])

    async def replace_pinned(self, username: str, usernames: Iterable[str]) -> Dict[str, Any]:
        """Overwrite the whole pinned set.

        Last writer wins: a caller that computed ``usernames`` from a
        stale read silently discards pins made in between.  Use
        ``add_pinned``/``remove_pinned`` to toggle a single username.
        """
        result = await self.collection.update_one(
            {"username": username},
            {"$set": {PINNED_FIELD: list(usernames)}},
            upsert=True,
        )
        return write_ack(result)

    async def add_pinned(self, username: str, writer: str) -> Dict[str, Any]:
        result = await self.collection.update_one(
            {"username": username},
            {"$addToSet": {PINNED_FIELD: writer}},
            upsert=True,
        )
        return write_ack(result)

    async def remove_pinned(self, username: str, writer: str) -> Dict[str, Any]:
        result = await self.collection.update_one(
            {"username": username},
            {"$pull": {PINNED_FIELD: writer}},
        )
        return write_ack(result)
