from datetime import datetime
from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from scman.db.base import Base, utcnow

class Invite(Base):
    __tablename__ = "invites"

    token = Column(String, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="invites")

    def is_expired(self, now: datetime = None) -> bool:
        return self.expires_at < (now or utcnow())

    def __repr__(self):
        return f"<Invite user={self.user_id} used={self.used}>"
