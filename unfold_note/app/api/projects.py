"""Project management endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_user
from unfold_note.app.models.user import User
from unfold_note.app.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from unfold_note.app.services.projects import create_project, get_project_by_url_id, get_user_projects

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectRead])
async def list_projects(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_user_projects(db, current_user.id)


@router.post("", response_model=ProjectRead)
async def create_user_project(
    project_in: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_project(db, project_in.name, current_user.id, project_in.description)


@router.get("/{project_url_id}", response_model=ProjectRead)
async def get_project(
    project_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_project_by_url_id(db, project_url_id, current_user.id)


@router.patch("/{project_url_id}", response_model=ProjectRead)
async def update_project(
    project_url_id: str,
    project_in: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    for field, value in project_in.model_dump(exclude_unset=True).items():
        if value is not None:  # Only update provided fields
            setattr(project, field, value)
    db.commit()
    db.refresh(project)
    return project


@router.delete("/{project_url_id}")
async def delete_project(
    project_url_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_project_by_url_id(db, project_url_id, current_user.id)
    db.delete(project)
    db.commit()
    return {"status": "deleted", "url_id": project_url_id}
