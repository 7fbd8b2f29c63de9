from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from scman.db.base import Base, BaseModel

class User(Base, BaseModel):
    __tablename__ = "users"

    username = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=False)
    passhash = Column(String, nullable=True)  # set on activation
    role = Column(String, nullable=False, default="user")
    active = Column(Boolean, default=False, nullable=False)

    invites = relationship("Invite", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    responses = relationship("Response", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
