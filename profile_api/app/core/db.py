"""
MongoDB integration.

This module owns the single motor ``AsyncIOMotorClient`` shared by the
whole process.  The client is created lazily on first use and reused
by every request afterwards; motor pools connections internally, so
callers never open or close connections themselves.

Profiles live in one collection, one document per username::

    {
        "username": "alice",
        "events": [...],
        "milestones": [...],
        "testimonials": [...],        # written by alice about others
        "pinnedTestimonials": [...],  # usernames pinned on alice's page
    }

``init_db`` is awaited on application start and creates the indexes
the data-access layer relies on.
"""

import logging
import threading
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from .config import settings
from .errors import StoreUnavailable


logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_client_lock = threading.Lock()


def get_client() -> AsyncIOMotorClient:
    """Return the process-wide client, creating it on first call."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                timeout = settings.mongo_timeout_ms
                _client = AsyncIOMotorClient(
                    settings.mongo_uri,
                    serverSelectionTimeoutMS=timeout,
                    connectTimeoutMS=timeout,
                    socketTimeoutMS=timeout,
                )
                logger.info("MongoDB client created for database '%s'", settings.mongo_db_name)
    return _client


def set_client(client: Optional[AsyncIOMotorClient]) -> None:
    """Replace the shared client (used by tests to inject a mock store)."""
    global _client
    with _client_lock:
        _client = client


def close_client() -> None:
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[settings.mongo_db_name]


def get_profiles_collection() -> AsyncIOMotorCollection:
    return get_database()[settings.profiles_collection]


async def init_db() -> None:
    """Create the indexes used by the repositories.

    ``username`` is unique: every add upserts by username, and the
    index keeps two concurrent first writes from creating two
    profiles.  ``testimonials.username`` is the reverse index used
    to find every testimonial written about a given user.
    """
    collection = get_profiles_collection()
    try:
        await collection.create_index([("username", ASCENDING)], unique=True, name="username_unique")
        await collection.create_index([("testimonials.username", ASCENDING)], name="testimonials_subject")
    except PyMongoError as e:
        logger.error("Failed to initialise MongoDB indexes: %s", e)
        raise StoreUnavailable() from e


async def ping() -> bool:
    """Return ``True`` if the store answers a ``ping`` command."""
    try:
        await get_database().command("ping")
        return True
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", e)
        return False
