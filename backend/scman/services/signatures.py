"""
Attendance signatures: record a user's answer to an event while capping how
many times that answer may be submitted.

Counting rules:
    * the first submission is always accepted and stores count = 1;
    * a later submission is accepted only while the stored count is below the
      event's change_limit, and increments it;
    * resubmitting the same status is still a submission;
    * limit_reached is reported once the stored count is >= change_limit.

So change_limit = L allows L submissions in total, and change_limit = 0
allows exactly one.
"""
from dataclasses import dataclass
from typing import Optional
import logging

from sqlalchemy import select, update, insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from scman.db.base import utcnow
from scman.models.event import Event
from scman.models.response import Response, NO_RESPONSE

logger = logging.getLogger(__name__)


class SignatureError(Exception):
    """Base error for signature operations"""

    message = "Signature error."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class EventNotFoundError(SignatureError):
    message = "Event not found."


class ChangeLimitReachedError(SignatureError):
    message = "Cannot change signature. Limit reached."


class SignatureWriteError(SignatureError):
    message = "SQL Error."


@dataclass
class SignResult:
    status: int
    count: int
    limit_reached: bool


class SignatureService:

    def _change_limit(self, db: Session, event_id: int) -> int:
        change_limit = db.execute(
            select(Event.change_limit).where(Event.id == event_id)
        ).scalar_one_or_none()
        if change_limit is None:
            raise EventNotFoundError(f"Event {event_id} not found.")
        return change_limit

    def _count(self, db: Session, user_id: int, event_id: int) -> Optional[int]:
        return db.execute(
            select(Response.count).where(
                Response.user_id == user_id,
                Response.event_id == event_id,
            )
        ).scalar_one_or_none()

    def _conditional_update(self, db: Session, user_id: int, event_id: int, status: int, change_limit: int) -> bool:
        # Check and increment in one statement; matches nothing once the cap is hit.
        result = db.execute(
            update(Response)
            .where(
                Response.user_id == user_id,
                Response.event_id == event_id,
                Response.count < change_limit,
            )
            .values(status=status, count=Response.count + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _insert_first(self, db: Session, user_id: int, event_id: int, status: int) -> bool:
        try:
            with db.begin_nested():
                db.execute(
                    insert(Response).values(
                        user_id=user_id,
                        event_id=event_id,
                        status=status,
                        count=1,
                        updated_at=utcnow(),
                    )
                )
            return True
        except IntegrityError:
            return False

    def sign(self, db: Session, user_id: int, event_id: int, status: int) -> SignResult:
        """
        Record status for (user, event).
        Raises EventNotFoundError, ChangeLimitReachedError or SignatureWriteError.
        """
        try:
            change_limit = self._change_limit(db, event_id)

            applied = self._conditional_update(db, user_id, event_id, status, change_limit)
            if not applied and self._count(db, user_id, event_id) is None:
                applied = self._insert_first(db, user_id, event_id, status)
                if not applied:
                    if self._count(db, user_id, event_id) is None:
                        raise SignatureWriteError("Failed to record signature.")
                    # A concurrent request created the row first
                    applied = self._conditional_update(db, user_id, event_id, status, change_limit)

            if not applied:
                raise ChangeLimitReachedError()

            count = self._count(db, user_id, event_id)
            db.commit()

        except SignatureError as e:
            db.rollback()
            logger.warning(f"Signature rejected for user {user_id} on event {event_id}: {e.message}")
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Signature write failed for user {user_id} on event {event_id}: {e}")
            raise SignatureWriteError() from e

        limit_reached = count >= change_limit
        logger.info(
            f"✅ User {user_id} signed event {event_id} with status {status} "
            f"(count={count}, change_limit={change_limit}, limit_reached={limit_reached})"
        )
        return SignResult(status=status, count=count, limit_reached=limit_reached)

    def limit_reached(self, db: Session, user_id: int, event_id: int) -> bool:
        """True when the user can no longer change their answer for the event"""
        change_limit = self._change_limit(db, event_id)
        count = self._count(db, user_id, event_id)
        return count is not None and count >= change_limit

    def current_status(self, db: Session, user_id: int, event_id: int) -> int:
        status = db.execute(
            select(Response.status).where(
                Response.user_id == user_id,
                Response.event_id == event_id,
            )
        ).scalar_one_or_none()
        return NO_RESPONSE if status is None else status


# Singleton instance
signature_service = SignatureService()
