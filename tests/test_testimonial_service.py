import pytest

from profile_api.app.core.errors import ValidationError
from profile_api.app.repositories import testimonials as testimonial_repository
from profile_api.app.services import testimonial_service


Service = testimonial_service.TestimonialService


async def write(writer, subject, title="Great person", description="Helped me a lot"):
    return await Service.add_testimonial(writer, subject, {"title": title, "description": description})


@pytest.mark.asyncio
async def test_list_for_owner_joins_testimonials_from_other_profiles(store):
    await write("bob", "alice", description="From bob")
    await write("carol", "alice", description="From carol")
    await write("carol", "dave", description="Not about alice")

    listed = await Service.list_for_owner("alice")

    assert sorted((t.username, t.description) for t in listed) == [
        ("bob", "From bob"),
        ("carol", "From carol"),
    ]
    assert not any(t.is_pinned for t in listed)


@pytest.mark.asyncio
async def test_list_for_owner_flags_pinned_writers(store):
    await write("bob", "alice")
    await write("carol", "alice")
    await Service.set_pinned("alice", ["carol"])

    pinned = {t.username: t.is_pinned for t in await Service.list_for_owner("alice")}

    assert pinned == {"bob": False, "carol": True}


@pytest.mark.asyncio
async def test_list_for_owner_without_testimonials_is_empty(store):
    assert await Service.list_for_owner("alice") == []


@pytest.mark.asyncio
async def test_testimonial_date_keeps_its_timestamp(store):
    await Service.add_testimonial(
        "bob", "alice", {"title": "Great", "description": "Helped", "date": "2022-12-09T16:00:00.000+00:00"}
    )

    [testimonial] = await Service.list_for_owner("alice")

    assert testimonial.date == "2022-12-09T16:00:00.000+00:00"


@pytest.mark.asyncio
async def test_set_pinned_replaces_the_whole_set_and_creates_profile(store):
    ack = await Service.set_pinned("alice", ["bob", "carol"])

    assert ack["upsertedId"] is not None
    assert await Service.get_pinned("alice") == ["bob", "carol"]

    await Service.set_pinned("alice", ["dave"])

    assert await Service.get_pinned("alice") == ["dave"]


@pytest.mark.asyncio
async def test_set_pinned_is_idempotent(store):
    await Service.set_pinned("alice", ["bob", "carol"])
    ack = await Service.set_pinned("alice", ["bob", "carol"])

    assert ack["matchedCount"] == 1
    assert await Service.get_pinned("alice") == ["bob", "carol"]


@pytest.mark.asyncio
async def test_set_pinned_drops_duplicates(store):
    await Service.set_pinned("alice", ["bob", "bob", "carol"])

    assert await Service.get_pinned("alice") == ["bob", "carol"]


@pytest.mark.asyncio
async def test_set_pinned_rejects_blank_usernames(store):
    with pytest.raises(ValidationError):
        await Service.set_pinned("alice", ["bob", " "])


@pytest.mark.asyncio
async def test_concurrent_set_pinned_loses_a_toggle(store):
    repo = testimonial_repository.TestimonialRepository()
    await Service.set_pinned("alice", ["bob"])

    # Two callers read the same set, then each writes back its own toggle.
    seen_by_first = await repo.get_pinned("alice")
    seen_by_second = await repo.get_pinned("alice")
    await Service.set_pinned("alice", seen_by_first + ["carol"])
    await Service.set_pinned("alice", [u for u in seen_by_second if u != "bob"])

    # The first caller's pin of carol is gone.
    assert await Service.get_pinned("alice") == []


@pytest.mark.asyncio
async def test_atomic_pin_and_unpin_do_not_lose_toggles(store):
    await Service.set_pinned("alice", ["bob"])

    await Service.pin("alice", "carol")
    await Service.unpin("alice", "bob")

    assert await Service.get_pinned("alice") == ["carol"]


@pytest.mark.asyncio
async def test_pin_is_idempotent_and_unpin_of_unknown_user_is_harmless(store):
    await Service.pin("alice", "carol")
    await Service.pin("alice", "carol")
    await Service.unpin("alice", "nobody")
    await Service.unpin("ghost", "nobody")

    assert await Service.get_pinned("alice") == ["carol"]
    assert await store.count_documents({"username": "ghost"}) == 0


@pytest.mark.asyncio
async def test_rewriting_a_testimonial_replaces_it(store):
    first = await write("bob", "alice", description="v1")
    second = await write("bob", "alice", description="v2")

    assert first["_id"] == second["_id"]
    listed = await Service.list_for_owner("alice")
    assert [(t.username, t.description) for t in listed] == [("bob", "v2")]


@pytest.mark.asyncio
async def test_testimonial_is_stored_on_the_writer_profile(store):
    await write("bob", "alice")

    assert (await store.find_one({"username": "bob"}))["testimonials"][0]["username"] == "alice"
    assert await store.count_documents({"username": "alice"}) == 0


@pytest.mark.asyncio
async def test_cannot_write_testimonial_about_yourself(store):
    with pytest.raises(ValidationError) as exc:
        await write("alice", "alice")

    assert "username" in exc.value.errors


@pytest.mark.asyncio
async def test_invalid_testimonial_is_rejected(store):
    with pytest.raises(ValidationError) as exc:
        await Service.add_testimonial("bob", "alice", {"title": "x"})

    assert {"title", "description"} <= set(exc.value.errors)
