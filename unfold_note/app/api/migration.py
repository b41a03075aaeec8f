"""Maintenance endpoint that backfills note thumbnails."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_admin
from unfold_note.app.models.project import Project
from unfold_note.app.models.user import User
from unfold_note.app.services.migration import (
    update_existing_notes_thumbnails,
    update_project_notes_thumbnails,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/migration", tags=["migration"])


@router.get("/thumbnails")
def migrate_thumbnails(
    project_url_id: str | None = None,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        if project_url_id:
            project = db.query(Project).filter(Project.url_id == project_url_id).first()
            if not project:
                return JSONResponse(
                    status_code=404,
                    content={"success": False, "message": "Project not found"},
                )
            updated_count = update_project_notes_thumbnails(db, project.id)
        else:
            updated_count = update_existing_notes_thumbnails(db)
    except SQLAlchemyError as exc:
        logger.exception("Thumbnail backfill failed")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to update thumbnails",
                "error": str(exc),
            },
        )

    return {
        "success": True,
        "message": f"Updated thumbnails for {updated_count} notes",
        "updatedCount": updated_count,
    }
