# Unfold Note backend entrypoint: notes, projects, tags and image storage over FastAPI.

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from unfold_note.app.api import admin
from unfold_note.app.api import files
from unfold_note.app.api import migration
from unfold_note.app.api import notes
from unfold_note.app.api import projects
from unfold_note.app.api import tags
from unfold_note.app.api.auth import router as auth
from unfold_note.app.core.dev_seed import ensure_default_dev_admin
from unfold_note.app.core.logging import configure_logging
from unfold_note.app.core.settings import get_settings
from unfold_note.app.core.url_id import UrlIdGenerationError
from unfold_note.app.db.base import Base
from unfold_note.app.db.session import SessionLocal, engine
from unfold_note.app.services.files import PUBLIC_OBJECT_PREFIX

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UrlIdGenerationError)
async def url_id_generation_error_handler(request: Request, exc: UrlIdGenerationError):
    logger.error("URL id generation failed on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(notes.router)
app.include_router(tags.router)
app.include_router(files.router)
app.include_router(admin.router)
app.include_router(migration.router)

Path(settings.storage_dir).mkdir(parents=True, exist_ok=True)
app.mount(PUBLIC_OBJECT_PREFIX, StaticFiles(directory=settings.storage_dir), name="storage")


@app.get("/")
def read_root():
    return {"app": "Unfold Note backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def init_database():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_default_dev_admin(db)
    finally:
        db.close()
