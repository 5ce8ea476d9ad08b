import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlmodel import Session
from starlette.websockets import WebSocketDisconnect

from jobportal.core.config import settings
from jobportal.main import app
from jobportal.services.portal_token import PortalTokenService
from tests.conftest import auth_headers, create_staff_and_login, seed_job_chain  # type: ignore


def test_viewer_receives_job_update(db_engine, db_session: Session) -> None:
    chain = seed_job_chain(db_session)
    job_id = str(chain["job"].id)

    with TestClient(app) as client:
        token, _ = create_staff_and_login(client, db_session)
        with client.websocket_connect(settings.live_updates_path) as websocket:
            websocket.send_json({"type": "init", "jobId": job_id})
            assert websocket.receive_json() == {"type": "connected", "message": f"Connected to job {job_id} updates"}

            response = client.put(
                f"{settings.api_prefix}/jobs/{job_id}",
                json={"stage": "in_progress"},
                headers=auth_headers(token),
            )
            assert response.status_code == status.HTTP_200_OK

            message = websocket.receive_json()
            assert message["type"] == "update"
            assert message["data"]["type"] == "job_update"
            assert message["data"]["job"]["id"] == job_id
            assert message["data"]["job"]["stage"] == "in_progress"


def test_malformed_messages_are_ignored(db_engine, db_session: Session) -> None:
    chain = seed_job_chain(db_session)
    job_id = str(chain["job"].id)

    with TestClient(app) as client:
        with client.websocket_connect(settings.live_updates_path) as websocket:
            websocket.send_bytes(b"\x00\x01")
            websocket.send_text("not json")
            websocket.send_json({"type": "hello"})
            websocket.send_json({"type": "init", "jobId": "not-a-uuid"})
            websocket.send_json({"type": "init", "jobId": job_id})

            assert websocket.receive_json()["type"] == "connected"


def test_viewers_of_other_jobs_receive_nothing(db_engine, db_session: Session) -> None:
    watched = seed_job_chain(db_session, title="Watched")
    other = seed_job_chain(db_session, title="Other")

    with TestClient(app) as client:
        token, _ = create_staff_and_login(client, db_session)
        with client.websocket_connect(settings.live_updates_path) as websocket:
            websocket.send_json({"type": "init", "jobId": str(watched["job"].id)})
            websocket.receive_json()

            client.post(
                f"{settings.api_prefix}/notes",
                json={"job_id": str(other["job"].id), "content": "Not for you"},
                headers=auth_headers(token),
            )
            client.post(
                f"{settings.api_prefix}/notes",
                json={"job_id": str(watched["job"].id), "content": "For you"},
                headers=auth_headers(token),
            )

            message = websocket.receive_json()
            assert message["data"]["type"] == "new_note"
            assert message["data"]["note"]["content"] == "For you"


def test_access_check_refuses_unknown_viewers(db_engine, db_session: Session, monkeypatch) -> None:
    monkeypatch.setattr(settings, "live_updates_require_access", True)
    chain = seed_job_chain(db_session)
    job_id = str(chain["job"].id)
    token = PortalTokenService(db_session).issue(chain["job"].id).token

    with TestClient(app) as client:
        with client.websocket_connect(settings.live_updates_path) as websocket:
            websocket.send_json({"type": "init", "jobId": job_id, "token": token})
            assert websocket.receive_json()["type"] == "connected"

        with client.websocket_connect(settings.live_updates_path) as websocket:
            websocket.send_json({"type": "init", "jobId": job_id, "token": "forged"})
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_json()
            assert exc_info.value.code == status.WS_1008_POLICY_VIOLATION
