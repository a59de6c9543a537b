import datetime
import logging

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from profile_api.app.core.errors import InvalidIdentifier, NotFound, StoreUnavailable, ValidationError
from profile_api.app.repositories.sub_collection import SubCollectionRepository
from profile_api.app.services.event_service import EventService


@pytest.mark.asyncio
async def test_add_then_get_round_trips_the_payload(store, event_payload):
    ack = await EventService.add("alice", event_payload)

    assert ack["acknowledged"] is True
    assert ack["upsertedId"] is not None

    event = await EventService.get("alice", ack["_id"])

    assert event.id == ack["_id"]
    assert event.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True) == event_payload


@pytest.mark.asyncio
async def test_timestamps_round_trip_unchanged(store, event_payload):
    payload = {
        **event_payload,
        "date": {"start": "2022-12-09T16:00:00.000+00:00", "end": "2022-12-09T18:00:00.000+00:00"},
    }

    ack = await EventService.add("alice", payload)
    event = await EventService.get("alice", ack["_id"])

    assert event.date.start == "2022-12-09T16:00:00.000+00:00"
    assert event.date.end == "2022-12-09T18:00:00.000+00:00"


@pytest.mark.asyncio
async def test_timestamps_in_other_offsets_are_compared_in_utc(store, event_payload):
    # 17:00+02:00 is 15:00 UTC, before the start
    payload = {
        **event_payload,
        "date": {"start": "2022-12-09T16:00:00+00:00", "end": "2022-12-09T17:00:00+02:00"},
    }

    with pytest.raises(ValidationError) as exc:
        await EventService.add("alice", payload)

    assert "date" in exc.value.errors


@pytest.mark.asyncio
async def test_stored_datetimes_are_read_back_as_iso_text(store, event_payload):
    oid = ObjectId()
    await store.insert_one({
        "username": "alice",
        "events": [{
            "_id": oid,
            "name": "Conf",
            "url": "https://x",
            "date": {"start": datetime.datetime(2022, 12, 9, 16), "end": datetime.datetime(2022, 12, 9, 18)},
        }],
    })

    event = await EventService.get("alice", str(oid))

    assert event.date.start == "2022-12-09T16:00:00"
    assert event.date.end == "2022-12-09T18:00:00"


@pytest.mark.asyncio
async def test_add_persists_camel_case_document(store, event_payload):
    await EventService.add("alice", {**event_payload, "description": "Talks", "order": 2})

    stored = (await store.find_one({"username": "alice"}))["events"][0]

    assert stored["isVirtual"] is True
    assert stored["date"] == {"start": "2024-01-01", "end": "2024-01-02"}
    assert stored["description"] == "Talks"
    assert isinstance(stored["_id"], ObjectId)


@pytest.mark.asyncio
async def test_numeric_price_is_stored_as_text(store, event_payload):
    ack = await EventService.add("alice", {**event_payload, "price": 25})

    assert (await EventService.get("alice", ack["_id"])).price == "25"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "change, field",
    [
        ({"name": "C"}, "name"),
        ({"name": "x" * 257}, "name"),
        ({"url": None}, "url"),
        ({"date": {"start": "2024-01-01"}}, "date.end"),
        ({"date": {"start": "2024-01-01", "end": "next tuesday"}}, "date.end"),
        ({"date": {"start": "2024-02-01", "end": "2024-01-01"}}, "date"),
    ],
)
async def test_invalid_payload_is_rejected_before_any_write(store, event_payload, change, field):
    with pytest.raises(ValidationError) as exc:
        await EventService.add("alice", {**event_payload, **change})

    assert field in exc.value.errors
    assert await store.count_documents({}) == 0


@pytest.mark.asyncio
async def test_missing_fields_are_all_reported(store):
    with pytest.raises(ValidationError) as exc:
        await EventService.add("alice", {})

    assert {"name", "url", "date"} <= set(exc.value.errors)


@pytest.mark.asyncio
async def test_update_replaces_event(store, event_payload):
    ack = await EventService.add("alice", {**event_payload, "description": "old"})
    changed = {**event_payload, "name": "Conf 2024", "_id": ack["_id"]}

    result = await EventService.update("alice", ack["_id"], changed)

    assert result["modifiedCount"] == 1
    event = await EventService.get("alice", ack["_id"])
    assert event.name == "Conf 2024"
    assert event.description is None


@pytest.mark.asyncio
async def test_update_accepts_payload_id_in_upper_case(store, event_payload):
    ack = await EventService.add("alice", event_payload)
    changed = {**event_payload, "name": "Renamed", "_id": ack["_id"].upper()}

    result = await EventService.update("alice", ack["_id"], changed)

    assert result["matchedCount"] == 1
    assert (await EventService.get("alice", ack["_id"])).name == "Renamed"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload_id", [str(ObjectId()), "not-an-id"])
async def test_update_with_mismatched_payload_id_is_rejected(store, event_payload, payload_id):
    ack = await EventService.add("alice", event_payload)

    with pytest.raises(ValidationError) as exc:
        await EventService.update("alice", ack["_id"], {**event_payload, "_id": payload_id})

    assert "_id" in exc.value.errors


@pytest.mark.asyncio
async def test_update_unknown_event_raises_not_found(store, event_payload):
    with pytest.raises(NotFound):
        await EventService.update("alice", str(ObjectId()), event_payload)


@pytest.mark.asyncio
async def test_get_unknown_event_is_logged_at_info(store, caplog):
    with caplog.at_level(logging.INFO):
        with pytest.raises(NotFound):
            await EventService.get("alice", str(ObjectId()))

    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.asyncio
async def test_get_malformed_id_raises_invalid_identifier(store):
    with pytest.raises(InvalidIdentifier):
        await EventService.get("alice", "nope")


@pytest.mark.asyncio
async def test_list_and_remove(store, event_payload):
    second = await EventService.add("alice", {**event_payload, "name": "Second", "order": 2})
    await EventService.add("alice", {**event_payload, "name": "First", "order": 1})

    assert [e.name for e in await EventService.list("alice")] == ["First", "Second"]

    await EventService.remove("alice", second["_id"])

    assert [e.name for e in await EventService.list("alice")] == ["First"]


@pytest.mark.asyncio
async def test_store_failure_is_logged_with_username_and_not_leaked(store, event_payload, monkeypatch, caplog):
    async def unavailable(self, username, entity):
        raise ServerSelectionTimeoutError("mongo-secret-host:27017: connection refused")

    monkeypatch.setattr(SubCollectionRepository, "add", unavailable)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(StoreUnavailable) as exc:
            await EventService.add("alice", event_payload)

    assert "mongo-secret-host" not in exc.value.message
    assert any("username=alice" in r.getMessage() for r in caplog.records)
