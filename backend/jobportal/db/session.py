import os
from contextlib import contextmanager
from typing import Any, Generator, Iterator

from sqlmodel import Session, SQLModel, create_engine

import jobportal.db.base  # noqa: F401
from jobportal.core.config import settings
from jobportal.core.logging_setup import logger

connect_args: dict[str, Any] = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False
elif settings.database_url.startswith("postgresql"):
    client_encoding = os.getenv("POSTGRES_CLIENT_ENCODING", "UTF8")
    connect_args["options"] = f"-c client_encoding={client_encoding}"

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    future=True,
    connect_args=connect_args,
)


def init_db() -> None:
    SQLModel.metadata.create_all(bind=engine)
    logger.info("Database schema ready")


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@contextmanager
def session_scope() -> Iterator[Session]:
    """Short lived session for code running outside a request, e.g. websocket handlers."""
    generator = get_session()
    session = next(generator)
    try:
        yield session
    finally:
        generator.close()
