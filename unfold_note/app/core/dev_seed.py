import logging
import os

from sqlalchemy.orm import Session

from unfold_note.app.core.security import get_password_hash
from unfold_note.app.core.settings import get_settings
from unfold_note.app.models.allowed_email import AllowedEmail
from unfold_note.app.models.user import User
from unfold_note.app.services.projects import DEFAULT_PROJECT_DESCRIPTION, create_project, default_project_name

logger = logging.getLogger(__name__)

DEFAULT_DEV_PASSWORD = "Secret123!"


def ensure_default_dev_admin(db: Session) -> None:
    """
    Create the configured development admin (UNFOLD_DEV_ADMIN_EMAIL) if it does not exist.
    Skips execution when running under pytest to avoid altering test expectations.
    """
    if os.getenv("PYTEST_CURRENT_TEST"):
        return
    email = get_settings().dev_admin_email
    if not email:
        return

    if not db.query(AllowedEmail).filter(AllowedEmail.email == email).first():
        db.add(AllowedEmail(email=email))
        db.commit()

    if db.query(User).filter(User.email == email).first():
        return

    user = User(
        email=email,
        hashed_password=get_password_hash(DEFAULT_DEV_PASSWORD),
        is_active=True,
        is_admin=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    create_project(db, default_project_name(user), user.id, DEFAULT_PROJECT_DESCRIPTION)
    logger.info("Seeded development admin %s", email)
