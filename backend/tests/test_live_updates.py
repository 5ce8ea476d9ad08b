from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import pytest

from jobportal.services.live_updates import (
    FileAdded,
    FileDeleted,
    InMemoryChannelRegistry,
    JobUpdated,
    MessagePosted,
    NotePosted,
)

pytestmark = pytest.mark.anyio


@dataclass(eq=False)
class FakeChannel:
    channel_id: str = field(default_factory=lambda: uuid4().hex)
    is_open: bool = True
    fail: bool = False
    received: list[dict[str, Any]] = field(default_factory=list)

    async def send(self, message: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        self.received.append(message)

    def updates(self) -> list[dict[str, Any]]:
        return [message["data"] for message in self.received if message["type"] == "update"]


async def test_register_sends_acknowledgement() -> None:
    registry = InMemoryChannelRegistry()
    channel = FakeChannel()
    job_id = uuid4()

    await registry.register(channel, job_id)

    assert channel.received == [{"type": "connected", "message": f"Connected to job {job_id} updates"}]
    assert registry.channels_for(job_id) == [channel]
    assert registry.job_for(channel) == job_id


async def test_publish_reaches_only_channels_of_that_job() -> None:
    registry = InMemoryChannelRegistry()
    job_a, job_b = uuid4(), uuid4()
    a1, a2, b1 = FakeChannel(), FakeChannel(), FakeChannel()
    await registry.register(a1, job_a)
    await registry.register(a2, job_a)
    await registry.register(b1, job_b)

    delivered = await registry.publish(job_a, JobUpdated(job={"id": str(job_a), "stage": "in_progress"}))

    assert delivered == 2
    assert a1.updates() == [{"type": "job_update", "job": {"id": str(job_a), "stage": "in_progress"}}]
    assert a2.updates() == a1.updates()
    assert b1.updates() == []


async def test_events_arrive_in_publish_order() -> None:
    registry = InMemoryChannelRegistry()
    job_id = uuid4()
    channel = FakeChannel()
    await registry.register(channel, job_id)
    file_id = uuid4()

    await registry.publish(job_id, FileAdded(file={"id": str(file_id)}))
    await registry.publish(job_id, NotePosted(note={"content": "Tiles arrived"}))
    await registry.publish(job_id, MessagePosted(message={"body": "See you Monday"}))
    await registry.publish(job_id, FileDeleted(file_id=file_id))

    assert [update["type"] for update in channel.updates()] == [
        "new_file",
        "new_note",
        "new_message",
        "deleted_file",
    ]
    assert channel.updates()[-1] == {"type": "deleted_file", "file_id": str(file_id)}


async def test_publish_without_listeners_is_a_no_op() -> None:
    registry = InMemoryChannelRegistry()

    assert await registry.publish(uuid4(), JobUpdated(job={})) == 0


async def test_unregister_is_idempotent() -> None:
    registry = InMemoryChannelRegistry()
    job_id = uuid4()
    channel = FakeChannel()
    await registry.register(channel, job_id)

    registry.unregister(channel)
    registry.unregister(channel)
    registry.unregister(FakeChannel())

    assert registry.channels_for(job_id) == []
    assert registry.job_for(channel) is None
    assert await registry.publish(job_id, JobUpdated(job={})) == 0


async def test_closed_and_failing_channels_are_pruned() -> None:
    registry = InMemoryChannelRegistry()
    job_id = uuid4()
    healthy, closed, failing = FakeChannel(), FakeChannel(), FakeChannel()
    for channel in (healthy, closed, failing):
        await registry.register(channel, job_id)
    closed.is_open = False
    failing.fail = True

    delivered = await registry.publish(job_id, JobUpdated(job={"stage": "finishing"}))

    assert delivered == 1
    assert registry.channels_for(job_id) == [healthy]
    assert len(healthy.updates()) == 1


async def test_reregistering_moves_channel_to_new_job() -> None:
    registry = InMemoryChannelRegistry()
    old_job, new_job = uuid4(), uuid4()
    channel = FakeChannel()
    await registry.register(channel, old_job)

    await registry.register(channel, new_job)
    await registry.publish(old_job, JobUpdated(job={"job": "old"}))
    await registry.publish(new_job, JobUpdated(job={"job": "new"}))

    assert registry.channels_for(old_job) == []
    assert registry.job_for(channel) == new_job
    assert channel.updates() == [{"type": "job_update", "job": {"job": "new"}}]


async def test_channel_closed_before_acknowledgement_is_dropped() -> None:
    registry = InMemoryChannelRegistry()
    job_id = uuid4()
    channel = FakeChannel(is_open=False)

    await registry.register(channel, job_id)

    assert registry.channels_for(job_id) == []
    assert channel.received == []
