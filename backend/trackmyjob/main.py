"""
TrackMyJob API entry point.

Run with ``uvicorn trackmyjob.main:app``.
"""

import os
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from trackmyjob.config import settings
from trackmyjob.database import init_db
from trackmyjob.logging_config import setup_logging, get_logger
from trackmyjob.api.errors import register_error_handling
from trackmyjob.api.routes import profiles, applications, files, dashboard
from trackmyjob.services.storage import PUBLIC_FOLDERS

setup_logging()

logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(f"Starting {settings.app_name} v{VERSION} (auth mode: {settings.auth_mode})")
    await init_db()
    yield
    logger.info("Stopped")


def mount_public_storage(app: FastAPI) -> None:
    """Serve public folders (avatars) as static files; private ones stay behind the API."""
    for folder in sorted(PUBLIC_FOLDERS):
        directory = os.path.join(settings.storage_path, folder)
        os.makedirs(directory, exist_ok=True)
        app.mount(
            f"{settings.storage_public_url}/{folder}",
            StaticFiles(directory=directory),
            name=f"storage-{folder}",
        )


app = FastAPI(
    title=settings.app_name,
    description="Job application tracker API",
    version=VERSION,
    lifespan=lifespan,
)

register_error_handling(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profiles.router, prefix="/api/profile", tags=["Profile"])
app.include_router(applications.router, prefix="/api/applications", tags=["Applications"])
app.include_router(files.router, prefix="/api/files", tags=["Files"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])

mount_public_storage(app)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Liveness probe; needs no token."""
    return {"status": "healthy"}
