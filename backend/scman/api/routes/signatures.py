from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import logging
from scman.api.deps import get_db
from scman.core.deps import get_current_user
from scman.models.user import User
from scman.schemas import LimitStatus, SignRequest, SignResponse
from scman.services.notifications import notification_center
from scman.services.signatures import (
    ChangeLimitReachedError,
    EventNotFoundError,
    SignatureWriteError,
    signature_service,
)

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/sign_evt", response_model=SignResponse)
def sign_event(
    data: SignRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Record the caller's answer (0 not going, 1 going, 2 maybe) for an event.
    limit_reached tells the client no further changes will be accepted.
    """
    try:
        result = signature_service.sign(db, user.id, data.event_id, data.status)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except (ChangeLimitReachedError, SignatureWriteError) as e:
        notification_center.push(user.id, "Failed to update status.", kind="error")
        raise HTTPException(status_code=400, detail=e.message)

    if result.limit_reached:
        notification_center.push(user.id, "No further changes possible for this event.")
    else:
        notification_center.push(user.id, "Signature saved.")

    return SignResponse(ok=True, limit_reached=result.limit_reached)

@router.get("/sign_limit_reached", response_model=LimitStatus)
def sign_limit_reached(
    id: int = Query(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    try:
        reached = signature_service.limit_reached(db, user.id, id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return LimitStatus(status=reached)
