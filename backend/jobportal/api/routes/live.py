from __future__ import annotations

import json
from typing import Any
from uuid import UUID

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from jobportal.core.config import settings
from jobportal.core.logging_setup import logger
from jobportal.db.session import session_scope
from jobportal.services.errors import PortalNotFoundError, SessionStoreError
from jobportal.services.live_updates import ChannelRegistry, WebSocketChannel
from jobportal.services.portal_access import PortalAccessGate
from jobportal.services.portal_session import PortalAuthService, SqlSessionStore
from jobportal.services.portal_token import PortalTokenService

router = APIRouter(tags=["live"])


def _parse_init(payload: Any) -> tuple[UUID, str | None] | None:
    if not isinstance(payload, dict) or payload.get("type") != "init":
        return None
    try:
        job_id = UUID(str(payload.get("jobId")))
    except ValueError:
        return None
    token = payload.get("token")
    return job_id, token if isinstance(token, str) else None


def _may_watch(websocket: WebSocket, job_id: UUID, token: str | None) -> bool:
    with session_scope() as session:
        if token:
            try:
                return PortalTokenService(session).resolve(token) == job_id
            except PortalNotFoundError:
                return False

        session_id = websocket.cookies.get(settings.portal_session_cookie)
        if settings.portal_session_backend == "database":
            store = SqlSessionStore(session)
        else:
            store = websocket.app.state.session_store
        try:
            identity = PortalAuthService(session, store).current_identity(session_id)
        except SessionStoreError:
            logger.exception("Session lookup failed for live update channel")
            return False
        if identity is None:
            return False
        return PortalAccessGate(session).session_can_view(identity, job_id)


@router.websocket(settings.live_updates_path)
async def live_updates(websocket: WebSocket) -> None:
    registry: ChannelRegistry = websocket.app.state.channel_registry
    await websocket.accept()
    channel = WebSocketChannel(websocket)
    logger.info("Live update channel %s connected", channel.channel_id)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            raw = message.get("text")
            if raw is None:
                logger.warning("Ignoring binary frame on channel %s", channel.channel_id)
                continue
            try:
                payload = json.loads(raw)
            except ValueError:
                logger.warning("Invalid message format on channel %s", channel.channel_id)
                continue

            parsed = _parse_init(payload)
            if parsed is None:
                logger.warning("Ignoring unexpected message on channel %s", channel.channel_id)
                continue
            job_id, token = parsed

            if settings.live_updates_require_access and not await run_in_threadpool(_may_watch, websocket, job_id, token):
                logger.warning("Channel %s refused for job %s", channel.channel_id, job_id)
                await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
                break

            await registry.register(channel, job_id)
    except WebSocketDisconnect:
        pass
    finally:
        registry.unregister(channel)
        logger.info("Live update channel %s closed", channel.channel_id)
