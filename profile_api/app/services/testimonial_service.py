"""
Business logic for testimonials.

Owners see every testimonial written about them and choose which
ones to pin.  ``set_pinned`` replaces the whole set in one write and
is last-writer-wins under concurrent use; ``pin`` and ``unpin``
toggle one writer atomically and are safe to call concurrently.
"""

from typing import Any, Awaitable, Dict, Iterable, List

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from ..core.errors import StoreUnavailable, ValidationError, field_errors
from ..core.logging_config import get_user_logger
from ..repositories.sub_collection import SubCollectionRepository
from ..repositories.testimonials import TESTIMONIALS_FIELD, TestimonialRepository
from ..schemas.testimonial import PinnedUsernames, TestimonialCreate, TestimonialRead


class TestimonialService:
    """Service for testimonials and the pinned-testimonial set."""

    @classmethod
    async def _run(cls, username: str, action: str, operation: Awaitable[Any]) -> Any:
        log = get_user_logger(__name__, username)
        try:
            return await operation
        except PyMongoError as e:
            log.error("failed to %s testimonials: %s", action, e)
            raise StoreUnavailable(f"Failed to {action} testimonials.") from e

    @classmethod
    async def list_for_owner(cls, username: str) -> List[TestimonialRead]:
        """Return testimonials written about ``username``, flagged if pinned."""
        repo = TestimonialRepository()
        testimonials = await cls._run(username, "load", repo.written_about(username))
        pinned = set(await cls._run(username, "load", repo.get_pinned(username)))
        return [
            TestimonialRead.model_validate({**t, "isPinned": t["username"] in pinned})
            for t in testimonials
        ]

    @classmethod
    async def get_pinned(cls, username: str) -> List[str]:
        repo = TestimonialRepository()
        return await cls._run(username, "load", repo.get_pinned(username))

    @classmethod
    async def set_pinned(cls, username: str, usernames: Iterable[str]) -> Dict[str, Any]:
        """Replace the pinned set with exactly ``usernames``.

        Duplicates are dropped.  Calling it twice with the same set
        leaves the set unchanged.
        """
        try:
            pins = PinnedUsernames(usernames=list(usernames))
        except PydanticValidationError as e:
            raise ValidationError(field_errors(e)) from e
        repo = TestimonialRepository()
        ack = await cls._run(username, "save", repo.replace_pinned(username, pins.usernames))
        get_user_logger(__name__, username).info("pinned testimonials set to %s", pins.usernames)
        return ack

    @classmethod
    async def pin(cls, username: str, writer: str) -> Dict[str, Any]:
        repo = TestimonialRepository()
        return await cls._run(username, "pin", repo.add_pinned(username, writer))

    @classmethod
    async def unpin(cls, username: str, writer: str) -> Dict[str, Any]:
        repo = TestimonialRepository()
        return await cls._run(username, "unpin", repo.remove_pinned(username, writer))

    @classmethod
    async def add_testimonial(cls, writer: str, subject: str, payload: Any) -> Dict[str, Any]:
        """Write (or rewrite) ``writer``'s testimonial about ``subject``.

        The testimonial is stored in the writer's profile.  A writer has
        at most one testimonial per subject; writing again replaces it.
        """
        if writer == subject:
            raise ValidationError({"username": "You cannot write a testimonial about yourself"})
        if not isinstance(payload, dict):
            raise ValidationError({"body": "Expected a JSON object describing the testimonial"})
        try:
            data = TestimonialCreate.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(field_errors(e)) from e
        repo = SubCollectionRepository(TESTIMONIALS_FIELD, label="Testimonial")
        document = data.model_dump(mode="json", exclude_none=True)
        ack = await cls._run(writer, "save", repo.upsert_by(writer, "username", subject, document))
        get_user_logger(__name__, writer).info("wrote testimonial about %s", subject)
        return ack
