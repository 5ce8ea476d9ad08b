from __future__ import annotations

import os
import uuid

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlmodel import Session, SQLModel, create_engine

from jobportal.core.config import settings
from jobportal.db import session as db_session_module
from jobportal.db.session import get_session
from jobportal.main import app
from jobportal.models.contact import Contact
from jobportal.models.job import Job
from jobportal.models.sales import Contract, Quote
from jobportal.models.user import StaffRole
from jobportal.services.auth import AuthService
from jobportal.services.credentials import credential_store

pytestmark = pytest.mark.anyio

STAFF_PASSWORD = "Senha@123"


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def db_engine(tmp_path):
    test_database_url = os.getenv("TEST_DATABASE_URL")
    if not test_database_url:
        db_path = tmp_path / f"test_{uuid.uuid4().hex}.db"
        test_database_url = f"sqlite:///{db_path}"

    is_postgres = test_database_url.startswith("postgresql")

    admin_engine = None
    schema_name = None

    if is_postgres:
        schema_name = f"test_{uuid.uuid4().hex}"
        admin_engine = create_engine(test_database_url, future=True)
        with admin_engine.connect() as conn:
            conn.execution_options(isolation_level="AUTOCOMMIT").execute(
                text(f'CREATE SCHEMA IF NOT EXISTS "{schema_name}"')
            )
        connect_args = {"options": f"-csearch_path={schema_name},public"}
        engine = create_engine(test_database_url, connect_args=connect_args, future=True)
    else:
        engine = create_engine(test_database_url, connect_args={"check_same_thread": False})

    SQLModel.metadata.create_all(bind=engine)

    original_engine = db_session_module.engine
    original_get_session = db_session_module.get_session

    db_session_module.engine = engine

    def _get_session():
        with Session(engine) as session:
            yield session

    db_session_module.get_session = _get_session

    def override_dependency():
        yield from _get_session()

    app.dependency_overrides[get_session] = override_dependency

    yield engine

    app.dependency_overrides.pop(get_session, None)
    db_session_module.get_session = original_get_session
    db_session_module.engine = original_engine
    engine.dispose()
    if is_postgres and admin_engine and schema_name:
        with admin_engine.connect() as conn:
            conn.execution_options(isolation_level="AUTOCOMMIT").execute(
                text(f'DROP SCHEMA IF EXISTS "{schema_name}" CASCADE')
            )
        admin_engine.dispose()


@pytest.fixture()
def client(db_engine) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(db_engine) -> Session:
    with Session(db_engine) as session:
        yield session


@pytest.fixture()
def staff_token(client: TestClient, db_session: Session) -> dict[str, str]:
    token, _ = create_staff_and_login(client, db_session)
    return token


def create_staff_and_login(
    client: TestClient,
    db_session: Session,
    role: StaffRole = StaffRole.ADMIN,
) -> tuple[dict[str, str], str]:
    email = f"{uuid.uuid4().hex[:8]}_staff@example.com"
    AuthService(db_session).create_staff_user(email, "Staff Teste", STAFF_PASSWORD, role.value)

    login_response = client.post(
        f"{settings.api_prefix}/auth/login",
        json={"username": email, "password": STAFF_PASSWORD},
    )
    assert login_response.status_code == status.HTTP_200_OK, login_response.json()
    return login_response.json(), email


def auth_headers(token: dict[str, str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {token['access_token']}"}


def seed_job_chain(
    db_session: Session,
    *,
    email: str | None = None,
    password: str | None = None,
    contact: Contact | None = None,
    title: str = "Kitchen remodel",
) -> dict[str, object]:
    """Persist contact -> quote -> contract -> job and return the rows."""
    if contact is None:
        contact = Contact(
            first_name="Ana",
            last_name="Silva",
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            portal_enabled=password is not None,
            portal_password_hash=credential_store.hash(password) if password else None,
        )
        db_session.add(contact)
        db_session.flush()

    quote = Quote(contact_id=contact.id, total_cents=150000)
    db_session.add(quote)
    db_session.flush()

    contract = Contract(quote_id=quote.id)
    db_session.add(contract)
    db_session.flush()

    job = Job(contract_id=contract.id, title=title)
    db_session.add(job)
    db_session.commit()

    for row in (contact, quote, contract, job):
        db_session.refresh(row)
    return {"contact": contact, "quote": quote, "contract": contract, "job": job}
