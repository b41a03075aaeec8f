"""Project tag endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_user
from unfold_note.app.models.user import User
from unfold_note.app.schemas.tag import TagRead, TagStatus
from unfold_note.app.services.projects import get_project_by_url_id
from unfold_note.app.services.tags import check_if_matching_note_exists, get_project_tags, get_tag_class_name

router = APIRouter(prefix="/projects/{project_url_id}/tags", tags=["tags"])


@router.get("", response_model=list[TagRead])
async def list_tags(
    project_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    return get_project_tags(db, project.id)


@router.get("/{tag_name}", response_model=TagStatus)
async def tag_status(
    project_url_id: str,
    tag_name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    has_matching_note = check_if_matching_note_exists(db, tag_name, project.id)
    return {
        "name": tag_name,
        "has_matching_note": has_matching_note,
        "class_name": get_tag_class_name(tag_name, has_matching_note),
    }
