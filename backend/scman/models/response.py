from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from scman.db.base import Base, utcnow

STATUS_NOT_GOING = 0
STATUS_GOING = 1
STATUS_MAYBE = 2
NO_RESPONSE = -1

class Response(Base):
    """A user's attendance answer for one event"""
    __tablename__ = "responses"
    __table_args__ = (
        CheckConstraint("status IN (0, 1, 2)", name="ck_responses_status"),
    )

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    status = Column(Integer, nullable=False)
    count = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="responses")
    event = relationship("Event", back_populates="responses")

    def __repr__(self):
        return f"<Response user={self.user_id} event={self.event_id} status={self.status} count={self.count}>"
