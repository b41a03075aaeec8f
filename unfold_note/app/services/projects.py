"""Project services: ownership-scoped lookups and default project provisioning."""

import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from unfold_note.app.core.url_id import generate_unique_url_id
from unfold_note.app.models.project import Project
from unfold_note.app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "My Project"
DEFAULT_PROJECT_DESCRIPTION = "Default project"


def _project_url_id_exists(db: Session, url_id: str) -> bool:
    return db.query(Project.id).filter(Project.url_id == url_id).first() is not None


def get_user_projects(db: Session, user_id: int) -> List[Project]:
    return (
        db.query(Project)
        .filter(Project.owner_id == user_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


def create_project(db: Session, name: str, owner_id: int, description: str = "") -> Project:
    url_id = generate_unique_url_id(lambda candidate: _project_url_id_exists(db, candidate))
    project = Project(
        url_id=url_id,
        name=name,
        description=description,
        owner_id=owner_id,
        is_archived=False,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Created project %s for user %s", project.url_id, owner_id)
    return project


def get_project_by_url_id(db: Session, url_id: str, owner_id: int) -> Project:
    project = (
        db.query(Project)
        .filter(Project.url_id == url_id, Project.owner_id == owner_id)
        .first()
    )
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def default_project_name(user: User) -> str:
    display_name = user.full_name or (user.email.split("@")[0] if user.email else "") or "My"
    return f"{display_name}'s Project"


def ensure_user_has_project(db: Session, user: User, user_name: str = "") -> Project:
    """
    Return the user's most recent project, creating one when they have none.
    """
    projects = get_user_projects(db, user.id)
    if projects:
        return projects[0]
    return create_project(db, user_name or DEFAULT_PROJECT_NAME, user.id)
