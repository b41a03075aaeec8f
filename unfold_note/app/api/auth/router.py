"""Registration, login, and the one-time-code callback used by browser sign-in."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unfold_note.app.core.security import (
    ACCESS_COOKIE_NAME,
    create_access_token,
    create_auth_code,
    decode_auth_code,
    get_password_hash,
    verify_password,
)
from unfold_note.app.core.settings import get_settings
from unfold_note.app.core.time import utc_now
from unfold_note.app.core.url_id import UrlIdGenerationError
from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_user
from unfold_note.app.models.allowed_email import AllowedEmail
from unfold_note.app.models.user import User
from unfold_note.app.schemas.login import AuthCode, LoginRequest, Token
from unfold_note.app.schemas.user import UserCreate, UserRead
from unfold_note.app.services.projects import (
    DEFAULT_PROJECT_DESCRIPTION,
    create_project,
    default_project_name,
    get_user_projects,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _is_email_allowed(db: Session, email: str) -> bool:
    return db.query(AllowedEmail.id).filter(AllowedEmail.email == email).first() is not None


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    settings = get_settings()
    email = str(user_in.email)
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    # The first account administers the allow-list, so it cannot be on it yet.
    is_first_user = db.query(User.id).first() is None
    if settings.enforce_allowed_emails and not is_first_user and not _is_email_allowed(db, email):
        logger.info("Rejected signup for %s: not on the allow-list", email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Email is not allowed to sign up")

    user = User(
        email=email,
        full_name=user_in.full_name,
        hashed_password=get_password_hash(user_in.password),
        is_admin=is_first_user,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    create_project(db, default_project_name(user), user.id, DEFAULT_PROJECT_DESCRIPTION)
    return user


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == str(credentials.email)).first()
    if not user or not user.hashed_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")
    if not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    user.last_login = utc_now()
    db.commit()
    return {"access_token": create_access_token(user_id=user.id), "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/code", response_model=AuthCode)
def issue_auth_code(current_user: User = Depends(get_current_user)):
    settings = get_settings()
    return {
        "code": create_auth_code(current_user.id),
        "expires_in": settings.auth_code_expire_minutes * 60,
    }


def _redirect_with_session(path: str, user: User) -> RedirectResponse:
    response = RedirectResponse(url=path, status_code=status.HTTP_302_FOUND)
    response.set_cookie(ACCESS_COOKIE_NAME, create_access_token(user_id=user.id), httponly=True, samesite="lax")
    return response


@router.get("/callback")
def auth_callback(code: str | None = None, db: Session = Depends(get_db)):
    """
    Exchange a one-time code for a session and send the user to their notes.

    Every failure falls back to a redirect to ``/``.
    """
    home = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    if not code:
        logger.info("Auth callback without a code")
        return home

    try:
        user_id = decode_auth_code(code)
    except ValueError:
        logger.warning("Auth callback with an invalid code")
        return home

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        logger.warning("Auth callback code for unknown or inactive user %s", user_id)
        return home

    try:
        projects = get_user_projects(db, user.id)
        if projects:
            project = projects[0]
        else:
            project = create_project(db, default_project_name(user), user.id, DEFAULT_PROJECT_DESCRIPTION)
    except UrlIdGenerationError:
        logger.exception("Could not create default project for user %s", user.id)
        return _redirect_with_session("/", user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Project lookup failed during auth callback for user %s", user.id)
        return home
    return _redirect_with_session(f"/projects/{project.url_id}/notes", user)
