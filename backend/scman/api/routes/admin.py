from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from scman.api.deps import get_db
from scman.core.deps import require_admin
from scman.models.event import Event
from scman.models.user import User
from scman.schemas import (
    EraseEventRequest,
    EventCreate,
    ModifyUserRequest,
    OkResponse,
    UserResult,
)

router = APIRouter()
logger = logging.getLogger(__name__)

# ==============================================================================
# 1. USERS
# ==============================================================================

@router.get("/all_users", response_model=List[UserResult])
def all_users(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Every account, active or not. Password hashes never leave the server."""
    return db.query(User).order_by(User.full_name).all()


@router.post("/modify_user", response_model=OkResponse)
def modify_user(
    data: ModifyUserRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    user = db.query(User).filter(User.id == data.id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {data.id} not found"
        )

    if data.role is not None:
        try:
            previous = user.role
            user.role = data.role
            db.commit()
            logger.info(f"👤 [Admin] {user.username}: role {previous} -> {data.role}")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Role update failed: {e}")
            raise HTTPException(status_code=400, detail="SQL Error.")

    return OkResponse()

# ==============================================================================
# 2. EVENTS
# ==============================================================================

@router.post("/new_event", response_model=OkResponse)
def new_event(
    data: EventCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    if data.end < data.start:
        raise HTTPException(status_code=400, detail="Event cannot end before it starts.")

    event = Event(
        name=data.name,
        location=data.location,
        start=data.start,
        end=data.end,
        sub_limit_date=data.limit,
        change_limit=data.maxalt,
        type=data.type,
        description=data.description
    )
    try:
        db.add(event)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Event creation failed: {e}")
        raise HTTPException(status_code=400, detail="SQL Error.")

    logger.info(f"📅 [Admin] Created event {event.id} ({event.name})")
    return OkResponse()


@router.post("/erase_event", response_model=OkResponse)
def erase_event(
    data: EraseEventRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Delete an event together with every answer recorded for it"""
    event = db.query(Event).filter(Event.id == data.id).first()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event with ID {data.id} not found"
        )

    try:
        db.delete(event)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Event delete failed: {e}")
        raise HTTPException(status_code=400, detail="SQL Error.")

    logger.info(f"🗑️ [Admin] Deleted event {data.id}")
    return OkResponse()
