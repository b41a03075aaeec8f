"""Admin endpoints: admin check and the signup allow-list."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from unfold_note.app.db.session import get_db
from unfold_note.app.dependencies.auth import get_current_admin, get_current_user
from unfold_note.app.models.allowed_email import AllowedEmail
from unfold_note.app.models.user import User
from unfold_note.app.schemas.allowed_email import AllowedEmailCreate, AllowedEmailRead

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/status")
async def admin_status(current_user: User = Depends(get_current_user)):
    return {"is_admin": bool(current_user.is_admin)}


@router.get("/allowed-emails", response_model=list[AllowedEmailRead])
async def list_allowed_emails(db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)):
    return db.query(AllowedEmail).order_by(AllowedEmail.created_at.desc(), AllowedEmail.id.desc()).all()


@router.post("/allowed-emails", response_model=AllowedEmailRead)
async def add_allowed_email(
    email_in: AllowedEmailCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    email = str(email_in.email).strip()
    if db.query(AllowedEmail).filter(AllowedEmail.email == email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already allowed")
    allowed = AllowedEmail(email=email)
    db.add(allowed)
    db.commit()
    db.refresh(allowed)
    return allowed


@router.delete("/allowed-emails/{allowed_email_id}")
async def remove_allowed_email(
    allowed_email_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    allowed = db.query(AllowedEmail).filter(AllowedEmail.id == allowed_email_id).first()
    if not allowed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Allowed email not found")
    db.delete(allowed)
    db.commit()
    return {"status": "deleted", "id": allowed_email_id}
