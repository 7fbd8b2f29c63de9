from sqlalchemy import Column, String, Integer, Date, Text, CheckConstraint
from sqlalchemy.orm import relationship
from scman.db.base import Base, BaseModel

EVENT_COMPETITION = 0
EVENT_CAMP = 1
PUBLIC_EVENT_TYPES = (EVENT_COMPETITION, EVENT_CAMP)

class Event(Base, BaseModel):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("change_limit >= 0", name="ck_events_change_limit"),
    )

    name = Column(String, nullable=False)
    start = Column(Date, nullable=False, index=True)
    end = Column(Date, nullable=False)
    location = Column(String, nullable=False)
    sub_limit_date = Column(Date, nullable=False)  # submission deadline
    change_limit = Column(Integer, nullable=False, default=0)
    type = Column(Integer, nullable=False, default=EVENT_COMPETITION)
    description = Column(Text, nullable=True)

    responses = relationship("Response", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Event {self.name} ({self.start})>"
