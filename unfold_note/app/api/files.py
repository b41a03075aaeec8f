"""Image upload endpoints for note content."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_user
from unfold_note.app.models.user import User
from unfold_note.app.schemas.file import ImageUploadRead, StoredFileRead
from unfold_note.app.services.files import StorageError, get_project_images, upload_image
from unfold_note.app.services.projects import get_project_by_url_id

router = APIRouter(prefix="/projects/{project_url_id}/images", tags=["files"])


@router.post("", response_model=ImageUploadRead)
async def upload_project_image(
    project_url_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image uploads are supported")
    data = await file.read()
    try:
        url = upload_image(project.url_id, file.filename or "", data)
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return {"url": url}


@router.get("", response_model=list[StoredFileRead])
async def list_project_images(
    project_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    return get_project_images(project.url_id)
