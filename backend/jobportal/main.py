from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobportal.api.routes import auth, contacts, health, jobs, live, portal, sales
from jobportal.core.config import settings
from jobportal.core.logging_setup import logger
from jobportal.db.session import init_db
from jobportal.services.live_updates import InMemoryChannelRegistry
from jobportal.services.portal_session import InMemorySessionStore


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    init_db()
    yield


def _normalize_origin(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = value.strip().rstrip("/")
    return cleaned or None


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.project_name,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Process wide registries. Several instances need shared stores instead.
    application.state.channel_registry = InMemoryChannelRegistry()
    application.state.session_store = InMemorySessionStore()

    origins: list[str] = []
    for item in settings.allowed_origins + [settings.public_app_url]:
        normalized = _normalize_origin(item)
        if normalized and normalized not in origins:
            origins.append(normalized)
    logger.info(f"CORS configured with origins: {origins}")

    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health.router, prefix="/health")
    application.include_router(auth.router, prefix=settings.api_prefix)
    application.include_router(contacts.router, prefix=settings.api_prefix)
    application.include_router(sales.router, prefix=settings.api_prefix)
    application.include_router(jobs.router, prefix=settings.api_prefix)
    application.include_router(portal.router, prefix=settings.api_prefix)
    application.include_router(live.router)

    @application.get("/")
    def root():
        return {"service": settings.project_name}

    logger.info("Job portal API initialised")
    return application


app = create_app()
