from uuid import uuid4

from fastapi import status
from sqlmodel import Session, select

from jobportal.core.config import settings
from jobportal.main import app
from jobportal.models.audit import AuditLog
from jobportal.models.contact import Contact
from jobportal.models.sales import Quote
from jobportal.services.errors import SessionStoreError
from tests.conftest import auth_headers, seed_job_chain  # type: ignore

PORTAL = f"{settings.api_prefix}/portal"


def _issue_token(client, staff_token, job_id, **extra) -> dict:
    response = client.post(
        f"{PORTAL}/tokens",
        json={"job_id": str(job_id), **extra},
        headers=auth_headers(staff_token),
    )
    assert response.status_code == status.HTTP_201_CREATED, response.json()
    return response.json()


def test_token_link_shows_job(client, db_session: Session, staff_token) -> None:
    chain = seed_job_chain(db_session)
    issued = _issue_token(client, staff_token, chain["job"].id)

    assert issued["portal_url"].endswith(f"/portal/{issued['token']}")

    response = client.get(f"{PORTAL}/{issued['token']}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["job"]["id"] == str(chain["job"].id)
    assert body["contact"]["id"] == str(chain["contact"].id)
    assert "portal_password_hash" not in body["contact"]

    audit = db_session.exec(select(AuditLog).where(AuditLog.event_type == "portal_token_issued")).one()
    assert audit.job_id == chain["job"].id


def test_unknown_and_expired_tokens_look_the_same(client, db_session: Session, staff_token) -> None:
    chain = seed_job_chain(db_session)
    expired = _issue_token(client, staff_token, chain["job"].id, ttl_days=0)

    unknown_response = client.get(f"{PORTAL}/not-a-real-token")
    expired_response = client.get(f"{PORTAL}/{expired['token']}")

    assert unknown_response.status_code == status.HTTP_404_NOT_FOUND
    assert expired_response.status_code == status.HTTP_404_NOT_FOUND
    assert unknown_response.json() == expired_response.json()


def test_token_issue_requires_staff(client, db_session: Session) -> None:
    chain = seed_job_chain(db_session)

    response = client.post(f"{PORTAL}/tokens", json={"job_id": str(chain["job"].id)})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_issue_for_unknown_job(client, staff_token) -> None:
    response = client.post(
        f"{PORTAL}/tokens",
        json={"job_id": str(uuid4())},
        headers=auth_headers(staff_token),
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_document_decision_through_token(client, db_session: Session, staff_token) -> None:
    chain = seed_job_chain(db_session)
    issued = _issue_token(client, staff_token, chain["job"].id)

    response = client.post(f"{PORTAL}/{issued['token']}/documents/quote/approve")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "accepted"
    quote = db_session.get(Quote, chain["quote"].id)
    db_session.refresh(quote)
    assert quote.status == "accepted"

    invalid = client.post(f"{PORTAL}/{issued['token']}/documents/invoice/approve")
    assert invalid.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    unknown = client.post(f"{PORTAL}/missing/documents/contract/reject")
    assert unknown.status_code == status.HTTP_404_NOT_FOUND


def test_login_me_jobs_logout(client, db_session: Session) -> None:
    chain = seed_job_chain(db_session, email="client@example.com", password="portal-pass-1")

    login = client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": "portal-pass-1"})

    assert login.status_code == status.HTTP_200_OK, login.json()
    assert login.json()["id"] == str(chain["contact"].id)
    assert "portal_password_hash" not in login.json()
    assert settings.portal_session_cookie in login.cookies
    assert "httponly" in login.headers["set-cookie"].lower()

    me = client.get(f"{PORTAL}/me")
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["contact_id"] == str(chain["contact"].id)

    jobs = client.get(f"{PORTAL}/jobs")
    assert jobs.status_code == status.HTTP_200_OK
    assert [item["job"]["id"] for item in jobs.json()] == [str(chain["job"].id)]

    job = client.get(f"{PORTAL}/jobs/{chain['job'].id}")
    assert job.status_code == status.HTTP_200_OK

    logout = client.post(f"{PORTAL}/logout")
    assert logout.status_code == status.HTTP_200_OK
    assert logout.json() == {"message": "Successfully logged out"}

    client.cookies.clear()
    assert client.get(f"{PORTAL}/me").status_code == status.HTTP_401_UNAUTHORIZED
    assert client.post(f"{PORTAL}/logout").status_code == status.HTTP_200_OK


def test_login_failures_share_one_response(client, db_session: Session) -> None:
    seed_job_chain(db_session, email="client@example.com", password="portal-pass-1")
    seed_job_chain(db_session, email="disabled@example.com")

    attempts = [
        {"email": "client@example.com", "password": "wrong-pass"},
        {"email": "nobody@example.com", "password": "portal-pass-1"},
        {"email": "disabled@example.com", "password": "portal-pass-1"},
    ]
    responses = [client.post(f"{PORTAL}/login", json=payload) for payload in attempts]

    assert {response.status_code for response in responses} == {status.HTTP_401_UNAUTHORIZED}
    assert {response.json()["detail"] for response in responses} == {"Invalid credentials"}
    assert all(settings.portal_session_cookie not in response.cookies for response in responses)


def test_session_cannot_reach_foreign_job(client, db_session: Session) -> None:
    seed_job_chain(db_session, email="client@example.com", password="portal-pass-1")
    foreign = seed_job_chain(db_session, email="other@example.com", password="other-pass-1")

    client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": "portal-pass-1"})
    response = client.get(f"{PORTAL}/jobs/{foreign['job'].id}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Job not found"


def test_disabling_portal_revokes_session_access(client, db_session: Session, staff_token) -> None:
    chain = seed_job_chain(db_session, email="client@example.com", password="portal-pass-1")
    client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": "portal-pass-1"})

    disabled = client.post(
        f"{settings.api_prefix}/contacts/{chain['contact'].id}/disable-portal",
        headers=auth_headers(staff_token),
    )
    assert disabled.status_code == status.HTTP_200_OK

    assert client.get(f"{PORTAL}/jobs").status_code == status.HTTP_401_UNAUTHORIZED


def test_enable_portal_returns_temporary_password(client, db_session: Session, staff_token) -> None:
    chain = seed_job_chain(db_session, email="client@example.com")

    response = client.post(
        f"{settings.api_prefix}/contacts/{chain['contact'].id}/enable-portal",
        headers=auth_headers(staff_token),
    )

    assert response.status_code == status.HTTP_200_OK, response.json()
    body = response.json()
    assert body["contact"]["portal_enabled"] is True
    temporary_password = body["temporary_password"]
    assert temporary_password

    login = client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": temporary_password})
    assert login.status_code == status.HTTP_200_OK


def test_enable_portal_with_chosen_password_resets_it(client, db_session: Session, staff_token) -> None:
    chain = seed_job_chain(db_session, email="client@example.com", password="first-pass-1")

    response = client.post(
        f"{settings.api_prefix}/contacts/{chain['contact'].id}/enable-portal",
        json={"password": "second-pass-2"},
        headers=auth_headers(staff_token),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["temporary_password"] is None
    old = client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": "first-pass-1"})
    new = client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": "second-pass-2"})
    assert old.status_code == status.HTTP_401_UNAUTHORIZED
    assert new.status_code == status.HTTP_200_OK


def test_enable_portal_requires_email(client, db_session: Session, staff_token) -> None:
    contact = Contact(first_name="No", last_name="Email")
    db_session.add(contact)
    db_session.commit()

    response = client.post(
        f"{settings.api_prefix}/contacts/{contact.id}/enable-portal",
        headers=auth_headers(staff_token),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_enable_with_short_password_then_login(client, db_session: Session, staff_token) -> None:
    headers = auth_headers(staff_token)
    created = client.post(f"{settings.api_prefix}/contacts", json={"email": "a@x.com"}, headers=headers)
    assert created.status_code == status.HTTP_201_CREATED, created.json()

    enabled = client.post(
        f"{settings.api_prefix}/contacts/{created.json()['id']}/enable-portal",
        json={"password": "secret"},
        headers=headers,
    )
    assert enabled.status_code == status.HTTP_200_OK, enabled.json()

    ok = client.post(f"{PORTAL}/login", json={"email": "a@x.com", "password": "secret"})
    assert ok.status_code == status.HTTP_200_OK
    assert ok.json()["id"] == created.json()["id"]

    client.cookies.clear()
    wrong = client.post(f"{PORTAL}/login", json={"email": "a@x.com", "password": "wrong"})
    missing = client.post(f"{PORTAL}/login", json={"email": "missing@x.com", "password": "secret"})
    assert wrong.status_code == missing.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong.json() == missing.json() == {"detail": "Invalid credentials"}


def test_login_answers_500_when_session_cannot_be_saved(client, db_session: Session, monkeypatch) -> None:
    seed_job_chain(db_session, email="client@example.com", password="portal-pass-1")

    def broken_save(portal_session) -> None:
        raise SessionStoreError("Failed to persist portal session")

    monkeypatch.setattr(app.state.session_store, "save", broken_save)

    response = client.post(f"{PORTAL}/login", json={"email": "client@example.com", "password": "portal-pass-1"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "Session handling error"}
    assert settings.portal_session_cookie not in response.cookies
    assert "set-cookie" not in response.headers
    contact = db_session.exec(select(Contact).where(Contact.email == "client@example.com")).one()
    db_session.refresh(contact)
    assert contact.portal_last_login_at is None
