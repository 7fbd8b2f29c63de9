from typing import List
from fastapi import APIRouter, Depends, HTTPException
from scman.core.deps import get_current_user
from scman.models.user import User
from scman.schemas import NotificationResult, OkResponse
from scman.services.notifications import notification_center

router = APIRouter()

@router.get("/notifications", response_model=List[NotificationResult])
def pending_notifications(user: User = Depends(get_current_user)):
    return [n.to_dict() for n in notification_center.pending(user.id)]

@router.delete("/notifications/{notification_id}", response_model=OkResponse)
def dismiss_notification(notification_id: int, user: User = Depends(get_current_user)):
    if not notification_center.dismiss(user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return OkResponse()
