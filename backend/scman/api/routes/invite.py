from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import List, Optional
import logging
from scman.api.deps import get_db
from scman.core.config import settings
from scman.core.deps import require_admin
from scman.db.base import utcnow
from scman.models.invite import Invite
from scman.models.user import User
from scman.schemas import (
    ActivateRequest,
    ActivateResponse,
    ActivationCheck,
    ActivationLink,
    EraseTokenRequest,
    OkResponse,
    RegisterRequest,
    RegisterResponse,
)
from scman.utils.crypto import generate_invite_token, hash_password

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/register", response_model=RegisterResponse)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """
    Create an inactive account and the single-use invite that activates it
    """
    user = User(
        username=data.username,
        full_name=data.full_name,
        role=data.role,
        active=False
    )
    try:
        db.add(user)
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Username already exists.")

    token = generate_invite_token()
    invite = Invite(
        token=token,
        user_id=user.id,
        expires_at=utcnow() + timedelta(days=settings.INVITE_EXPIRE_DAYS),
        used=False
    )
    try:
        db.add(invite)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Invite generation error: {str(e)}")
        raise HTTPException(status_code=400, detail="Failed to generate invite code.")

    logger.info(f"✅ Generated invite for {user.username} ({user.role}) by {admin.username}")
    return RegisterResponse(inviteLink=f"/activate?token={token}")

@router.get("/activation_links", response_model=List[ActivationLink])
def activation_links(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    rows = (
        db.query(Invite, User)
        .join(User, Invite.user_id == User.id)
        .order_by(Invite.created_at.desc())
        .all()
    )

    return [
        ActivationLink(
            token=invite.token,
            user_id=user.id,
            expires_at=invite.expires_at,
            used=invite.used,
            username=user.username,
            full_name=user.full_name,
            role=user.role,
            active=user.active
        )
        for invite, user in rows
    ]

@router.post("/erase_token", response_model=OkResponse)
def erase_token(
    data: EraseTokenRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """
    Delete an invite. An account that was never activated goes with it.
    """
    invite = db.query(Invite).filter(Invite.token == data.token).first()
    if not invite:
        raise HTTPException(status_code=404, detail="Invalid token.")

    user = invite.user
    try:
        db.delete(invite)
        if not invite.used and not user.active:
            db.delete(user)
            logger.info(f"🗑️ Removed never-activated account {user.username}")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Invite delete failed: {e}")
        raise HTTPException(status_code=400, detail="SQL Error.")

    return OkResponse()

@router.get("/activate", response_model=ActivationCheck, response_model_exclude_none=True)
def check_activation(token: Optional[str] = None, db: Session = Depends(get_db)):
    if not token:
        return ActivationCheck(valid=False, reason="no_token")

    invite = db.query(Invite).filter(Invite.token == token).first()
    if not invite:
        return ActivationCheck(valid=False, reason="invalid_token")
    if invite.used:
        return ActivationCheck(valid=False, reason="used_token")
    if invite.is_expired():
        return ActivationCheck(valid=False, reason="expired_token")

    return ActivationCheck(valid=True, username=invite.user.username)

@router.post("/activate", response_model=ActivateResponse, response_model_exclude_none=True)
def activate(data: ActivateRequest, db: Session = Depends(get_db)):
    """
    Set the password and activate the account behind a single-use invite
    """
    passhash = hash_password(data.password)

    try:
        # marks the invite used only if nobody else got there first
        claimed = db.execute(
            update(Invite)
            .where(
                Invite.token == data.token,
                Invite.used.is_(False),
                Invite.expires_at >= utcnow()
            )
            .values(used=True)
            .execution_options(synchronize_session=False)
        ).rowcount == 1
        if not claimed:
            db.rollback()
            return ActivateResponse(ok=False, error="Invalid or expired link.")

        invite = db.query(Invite).filter(Invite.token == data.token).first()
        user = invite.user
        user.passhash = passhash
        user.active = True
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Activation failed: {e}")
        return ActivateResponse(ok=False, error="Failed to update user database.")

    logger.info(f"✅ Account {user.username} activated")
    return ActivateResponse(ok=True)
