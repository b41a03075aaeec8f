"""Authentication dependencies for retrieving the current user."""

from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from unfold_note.app.core.security import ACCESS_COOKIE_NAME, decode_access_token
from unfold_note.app.db.session import get_db
from unfold_note.app.models.user import User


def _extract_token(authorization: str | None, cookie_token: str | None) -> str | None:
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1]
    # The auth callback hands browsers their token as a cookie.
    return cookie_token


def get_current_user(
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None),
    access_token: str | None = Cookie(default=None, alias=ACCESS_COOKIE_NAME),
) -> User:
    # Expect Authorization: Bearer <token>, or the access_token cookie
    token = _extract_token(authorization, access_token)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = payload.get("sub")
    try:
        user_id_int = int(user_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = db.query(User).filter(User.id == user_id_int).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
