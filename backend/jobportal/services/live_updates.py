"""Per-job live update fan-out.

Portal viewers open a websocket, announce the job they are looking at and then
receive every mutation published for that job while they stay connected.
Delivery is best effort: closed or failing channels are pruned and nothing is
queued for viewers that are offline.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol, Union
from uuid import UUID, uuid4

from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from jobportal.core.logging_setup import logger


class LiveEventType(str, Enum):
    JOB_UPDATE = "job_update"
    NEW_FILE = "new_file"
    DELETED_FILE = "deleted_file"
    NEW_MESSAGE = "new_message"
    NEW_NOTE = "new_note"


@dataclass(frozen=True)
class JobUpdated:
    job: dict[str, Any]
    event_type: ClassVar[LiveEventType] = LiveEventType.JOB_UPDATE

    def payload(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "job": self.job}


@dataclass(frozen=True)
class FileAdded:
    file: dict[str, Any]
    event_type: ClassVar[LiveEventType] = LiveEventType.NEW_FILE

    def payload(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "file": self.file}


@dataclass(frozen=True)
class FileDeleted:
    file_id: UUID
    event_type: ClassVar[LiveEventType] = LiveEventType.DELETED_FILE

    def payload(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "file_id": str(self.file_id)}


@dataclass(frozen=True)
class MessagePosted:
    message: dict[str, Any]
    event_type: ClassVar[LiveEventType] = LiveEventType.NEW_MESSAGE

    def payload(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "message": self.message}


@dataclass(frozen=True)
class NotePosted:
    note: dict[str, Any]
    event_type: ClassVar[LiveEventType] = LiveEventType.NEW_NOTE

    def payload(self) -> dict[str, Any]:
        return {"type": self.event_type.value, "note": self.note}


LiveEvent = Union[JobUpdated, FileAdded, FileDeleted, MessagePosted, NotePosted]


class Channel(Protocol):
    channel_id: str

    @property
    def is_open(self) -> bool: ...

    async def send(self, message: dict[str, Any]) -> None: ...


class WebSocketChannel:
    """One viewer connection. Sends are serialised so a channel sees events in publish order."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self.channel_id = uuid4().hex
        self._send_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, message: dict[str, Any]) -> None:
        async with self._send_lock:
            await self.websocket.send_json(message)


class ChannelRegistry(Protocol):
    async def register(self, channel: Channel, job_id: UUID) -> None: ...

    def unregister(self, channel: Channel) -> None: ...

    async def publish(self, job_id: UUID, event: LiveEvent) -> int: ...

    def channels_for(self, job_id: UUID) -> list[Channel]: ...


class InMemoryChannelRegistry:
    def __init__(self) -> None:
        self._channels_by_job: dict[UUID, set[Channel]] = {}
        self._job_by_channel: dict[Channel, UUID] = {}

    async def register(self, channel: Channel, job_id: UUID) -> None:
        self._bind(channel, job_id)
        logger.info("Channel %s registered for job %s", channel.channel_id, job_id)
        await self._deliver(
            channel,
            job_id,
            {"type": "connected", "message": f"Connected to job {job_id} updates"},
        )

    def unregister(self, channel: Channel) -> None:
        job_id = self._job_by_channel.pop(channel, None)
        if job_id is None:
            return
        channels = self._channels_by_job.get(job_id)
        if channels is not None:
            channels.discard(channel)
            if not channels:
                del self._channels_by_job[job_id]
        logger.info("Channel %s unregistered from job %s", channel.channel_id, job_id)

    async def publish(self, job_id: UUID, event: LiveEvent) -> int:
        """Send ``event`` to every open channel watching ``job_id``. Never raises."""
        message = {"type": "update", "data": event.payload()}
        delivered = 0
        for channel in self.channels_for(job_id):
            if await self._deliver(channel, job_id, message):
                delivered += 1
        return delivered

    def channels_for(self, job_id: UUID) -> list[Channel]:
        return list(self._channels_by_job.get(job_id, ()))

    def job_for(self, channel: Channel) -> UUID | None:
        return self._job_by_channel.get(channel)

    def _bind(self, channel: Channel, job_id: UUID) -> None:
        current = self._job_by_channel.get(channel)
        if current == job_id:
            return
        if current is not None:
            self.unregister(channel)
        self._job_by_channel[channel] = job_id
        self._channels_by_job.setdefault(job_id, set()).add(channel)

    async def _deliver(self, channel: Channel, job_id: UUID, message: dict[str, Any]) -> bool:
        if not channel.is_open:
            logger.info("Pruning closed channel %s for job %s", channel.channel_id, job_id)
            self.unregister(channel)
            return False
        try:
            await channel.send(message)
        except Exception as exc:  # delivery is best effort
            logger.warning("Live update to channel %s failed: %s", channel.channel_id, exc)
            self.unregister(channel)
            return False
        return True
