from dataclasses import dataclass, field
from typing import List
import logging

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from scman.models.event import Event
from scman.models.response import Response, STATUS_NOT_GOING, STATUS_GOING, STATUS_MAYBE
from scman.models.user import User
from scman.services.signatures import EventNotFoundError, signature_service

logger = logging.getLogger(__name__)


@dataclass
class AttendanceSummary:
    not_going: List[str] = field(default_factory=list)
    going: List[str] = field(default_factory=list)
    maybe: List[str] = field(default_factory=list)
    noanswer: List[str] = field(default_factory=list)
    own_status: int = -1


class AttendanceService:

    def _names_with_status(self, db: Session, event_id: int, status: int) -> List[str]:
        return list(db.execute(
            select(User.full_name)
            .join(Response, Response.user_id == User.id)
            .where(Response.event_id == event_id, Response.status == status)
            .order_by(User.full_name)
        ).scalars())

    def _names_without_answer(self, db: Session, event_id: int) -> List[str]:
        return list(db.execute(
            select(User.full_name)
            .outerjoin(Response, and_(Response.user_id == User.id, Response.event_id == event_id))
            .where(Response.user_id.is_(None))
            .order_by(User.full_name)
        ).scalars())

    def summarize(self, db: Session, event_id: int, user_id: int) -> AttendanceSummary:
        """Group every user's full name by their answer to the event"""
        if db.get(Event, event_id) is None:
            raise EventNotFoundError(f"Event {event_id} not found.")

        return AttendanceSummary(
            not_going=self._names_with_status(db, event_id, STATUS_NOT_GOING),
            going=self._names_with_status(db, event_id, STATUS_GOING),
            maybe=self._names_with_status(db, event_id, STATUS_MAYBE),
            noanswer=self._names_without_answer(db, event_id),
            own_status=signature_service.current_status(db, user_id, event_id),
        )


attendance_service = AttendanceService()
