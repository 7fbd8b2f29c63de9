from datetime import date
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from scman.api.deps import get_db
from scman.core.deps import get_current_user
from scman.models.event import Event, PUBLIC_EVENT_TYPES
from scman.models.user import User
from scman.schemas import AttendanceResponse, EventResult
from scman.services.attendance import attendance_service
from scman.services.signatures import EventNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)

# Roles that may also see federation-only event types
FEDERATION_ROLES = ("admin", "federado")


@router.get("/all_events", response_model=List[EventResult])
def all_events(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return db.query(Event).order_by(Event.start).all()


@router.get("/upcoming", response_model=List[EventResult])
def upcoming(
    n: int = Query(10, ge=0),
    t: int = Query(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Next n events of type t, starting today or later.
    """
    if t not in PUBLIC_EVENT_TYPES and user.role not in FEDERATION_ROLES:
        raise HTTPException(status_code=400, detail="Invalid parameters.")

    return (
        db.query(Event)
        .filter(Event.type == t, Event.start >= date.today())
        .order_by(Event.start.asc())
        .limit(n)
        .all()
    )


@router.get("/attendance", response_model=AttendanceResponse)
def attendance(
    event: int = Query(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        summary = attendance_service.summarize(db, event, user.id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return AttendanceResponse(
        not_going=summary.not_going,
        going=summary.going,
        maybe=summary.maybe,
        noanswer=summary.noanswer,
        own_status=summary.own_status
    )
